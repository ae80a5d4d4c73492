import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "artive.settings")
django.setup()
