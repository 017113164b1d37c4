#!/usr/bin/env python
"""
Test runner for School Lab Booking.
Runs the pytest suite with the test settings module.
"""
import os
import sys

import pytest

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'booking.tests.test_settings')

    # Specify which tests to run
    test_args = sys.argv[1:] if len(sys.argv) > 1 else ['booking/tests', '-v']

    failures = pytest.main(test_args)

    if failures:
        sys.exit(1)
    else:
        print("\nAll tests passed!")
        sys.exit(0)
