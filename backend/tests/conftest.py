import os, sys, pytest
# Ensure the backend directory is on path so 'sekreterlik' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
import httpx
from sekreterlik import create_app, get_db
from sekreterlik.models.authz import Base
# Import all model modules to ensure tables are registered before create_all
import sekreterlik.models.audit  # noqa: F401
from sekreterlik.client.api_service import ApiService


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    app = create_app({'DATABASE_URL': 'sqlite+pysqlite:///:memory:'})
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def api(app_instance):
    """ApiService talking to the Flask app in-process."""
    service = ApiService('http://testserver', transport=httpx.WSGITransport(app=app_instance))
    yield service
    service.close()
