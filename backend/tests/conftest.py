import os, sys, pytest
# Ensure the backend directory is on path so 'saveplate' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from saveplate import create_app, get_db
from saveplate.models.user import Base
# Import all model modules to ensure tables are registered before create_all
import saveplate.models.location  # noqa: F401
import saveplate.models.waste_log  # noqa: F401
import saveplate.models.reporting  # noqa: F401
import saveplate.models.consent  # noqa: F401
import saveplate.models.knowledge_base  # noqa: F401
import saveplate.models.audit  # noqa: F401
import saveplate.models.vendor  # noqa: F401
import saveplate.models.inventory  # noqa: F401
import saveplate.models.purchase_order  # noqa: F401


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'JWT_SECRET_KEY': 'saveplate-test-secret-key-0123456789abcdef',
        'TESTING': True,
    })
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
