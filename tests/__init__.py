"""Test suite for praise2slides.

Tests mirror the source layout. Fixtures in conftest.py build real .xlsx and
.pptx files under tmp_path, so no sample data files are needed.

Running Tests:
    pytest                                  # Run all tests
    pytest -v                               # Verbose output
    pytest tests/test_orchestrator.py       # Run specific file
    pytest -k "merge"                       # Run tests with matching pattern in function name

Notes:
    - The autouse isolated_user_dirs fixture redirects ~/Documents/praise2slides into tmp_path
    - Nothing here runs the real setup_logger() on the "praise2slides" logger; it turns off propagation and would break caplog
"""
