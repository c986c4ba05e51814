from fastapi.testclient import TestClient
from liftlog.main import app
from liftlog.services.catalog import ExerciseCatalog, default_catalog

client = TestClient(app)

def test_lookup_filters_by_equipment_and_constraints():
    names = [e.name for e in default_catalog.lookup("legs", {"dumbbells"}, {"knee_issues"})]
    assert names == ["Romanian Deadlift", "Calf Raises"]

def test_lookup_keeps_library_order():
    names = [e.name for e in default_catalog.lookup("pull", {"bands", "machines"})]
    assert names == ["Lat Pulldown", "Face Pulls", "Bicep Curls"]

def test_get_is_case_insensitive():
    assert default_catalog.get("plank").category == "core"
    assert default_catalog.get("Nope") is None

def test_custom_catalog():
    catalog = ExerciseCatalog(default_catalog.lookup("core", {"bodyweight"}))
    assert {e.category for e in catalog.all()} == {"core"}

def test_catalog_endpoint():
    r = client.get("/catalog", params={"category": "push", "equipment": ["bodyweight"]})
    assert r.status_code == 200
    assert [e["name"] for e in r.json()] == ["Push-ups", "Tricep Dips"]
