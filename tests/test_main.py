from fastapi.testclient import TestClient

from app.main import app
from app.services.deadline_monitor import DeadlineMonitorRegistry


class TestApplication:
    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}

    def test_lifespan_installs_monitor_registry(self, client: TestClient):
        assert isinstance(app.state.deadline_monitors, DeadlineMonitorRegistry)

    def test_cors_middleware(self):
        assert any("CORS" in m.cls.__name__ for m in app.user_middleware)

    def test_routers_mounted(self):
        paths = {route.path for route in app.routes}
        assert "/projects/" in paths
        assert "/candidatures/{candidature_id}/accept" in paths
        assert "/partners/{partner_id}/permissions" in paths
        assert "/internal/admin/deadline-monitor" in paths
