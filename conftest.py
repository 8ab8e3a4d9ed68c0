import os
import sys
import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tournament_gateway.settings')


def pytest_configure(config):
    """Force an in-memory database and eager Celery for the test run."""
    from django.conf import settings

    settings.DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }
    settings.CELERY_BROKER_URL = 'memory://'
    settings.CELERY_RESULT_BACKEND = 'cache+memory://'
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


ADMIN_ID = '1000'


@pytest.fixture(autouse=True)
def gateway_settings(settings):
    """Deterministic external-service settings and a fresh process gateway per test."""
    from registrations.views import get_gateway

    settings.ADMIN_ID = ADMIN_ID
    settings.SPREADSHEET_ID = 'sheet-123'
    settings.SPREADSHEET_TOKEN = 'sheet-token'
    settings.SPREADSHEET_API_URL = 'https://sheets.example.test/v4/spreadsheets'
    settings.SPREADSHEET_RANGE = 'A:H'
    settings.VK_API_URL = 'https://vk.example.test/method'
    settings.VK_SERVICE_TOKEN = 'vk-token'
    settings.VK_API_VERSION = '5.199'
    settings.NOTIFICATION_SEND_DELAY = 0
    settings.MIRROR_BACKFILL_ENABLED = False
    settings.OCCURRENCE_PLACEHOLDER_LINK = 'https://vk.com'

    get_gateway.cache_clear()
    yield settings
    get_gateway.cache_clear()


@pytest.fixture
def admin_id():
    return ADMIN_ID


@pytest.fixture
def valid_submission():
    """Return a registration payload as the VK mini-app sends it."""
    return {
        'vk_id': '42',
        'name': 'Ivan Petrov',
        'school_id': '7',
        'school_name': 'School No. 7',
        'game_id': 'dota',
        'game_name': 'Dota 2',
        'phone': '+79991234567',
        'date': '2024-05-20T10:15:00.000Z',
    }


@pytest.fixture
def record_submission():
    """Return a registration payload using the record field names."""
    return {
        'participant_id': 43,
        'participant_name': 'Anna Smirnova',
        'group_id': 12,
        'group_name': 'Lyceum 12',
        'occurrence_id': 'dota',
        'occurrence_name': 'Dota 2',
        'contact_phone': '+79997654321',
        'submitted_at': '2024-05-21T08:00:00+00:00',
    }


@pytest.fixture
def catalog_file(tmp_path, settings):
    """Point OCCURRENCE_CATALOG_PATH at a small temporary catalog."""
    path = tmp_path / 'catalog.json'
    path.write_text(
        '{"dota": {"name": "Dota 2", "link": "https://vk.com/dota_cup"}}',
        encoding='utf-8'
    )
    settings.OCCURRENCE_CATALOG_PATH = str(path)
    return path
