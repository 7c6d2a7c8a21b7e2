#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Defaults to the development settings; set DJANGO_SETTINGS_MODULE to
``core.settings.production`` or ``core.settings.test`` to switch.
"""

import os
import sys


def main():
    """Run administrative tasks for Django."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
