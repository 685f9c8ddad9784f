from pathlib import Path
import dotenv
from typing import Dict


ROOT = Path(__file__).parent.parent

dotenv.load_dotenv(ROOT / '.env')


# HTTP settings
DEFAULT_TIMEOUT_SECONDS = 30
API_KEY_HEADER = 'X-API-Key'

# Remote endpoints
DEFAULT_DOC_HOST = 'vivalabs-dev.link'
DEFAULT_DOC_URL_TEMPLATE = 'https://api.{module}.{doc_host}/v1/internal-docs'
DEFAULT_PM_BASE_URL = 'https://api.getpostman.com'

# Module -> collection name
DEFAULT_MODULES: Dict[str, str] = {
    'members': 'Members Module API',
    'brands': 'Brands Module API',
    'classes': 'Classes Module API',
    'vivapay': 'Payments Module API',
}

# Environment variables
DOC_API_KEY_ENV = 'DOC_API_KEY'
PM_API_KEY_ENV = 'PM_API_KEY'
PM_WORKSPACE_ID_ENV = 'PM_WORKSPACE_ID'
