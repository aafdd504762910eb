"""
Smoke tests to verify all modules can be imported.
"""

def test_import_fixture():
    import fixture
    assert hasattr(fixture, '__version__')


def test_import_sandbox():
    import sandbox
    assert hasattr(sandbox, '__version__')


def test_import_workshop():
    import workshop
    assert hasattr(workshop, '__version__')
