import pytest
from sitesmith.core.errors import MalformedResponseError
from sitesmith.core.markup import external_references, is_self_contained
from sitesmith.core.structure import file_directive, normalize_file_structure, planned_files
from sitesmith.core.workflow import StepStatus, WorkflowStage, workflow_marker


def test_normalize_keeps_order_and_coerces_prompts():
    structure = normalize_file_structure({"public": {"type": "directory", "children": {
        "index.html": {"type": "file", "prompt": "Create a landing page"},
        "about.html": {"type": "file", "prompt": 42},
        "css": {"type": "directory", "children": {}},
    }}})
    assert planned_files(structure) == ["index.html", "about.html"]
    assert file_directive(structure, "index.html") == "Create a landing page"
    assert file_directive(structure, "about.html") is None
    assert file_directive(None, "index.html") is None


@pytest.mark.parametrize("data", [
    [],
    {"src": {}},
    {"public": {"type": "file"}},
    {"public": {"type": "directory", "children": {}}},
    {"public": {"type": "directory", "children": {"assets": {"type": "directory", "children": {}}}}},
])
def test_normalize_rejects_unusable_trees(data):
    with pytest.raises(MalformedResponseError):
        normalize_file_structure(data)


def test_external_references_detected():
    html = (
        '<link rel="stylesheet" href="https://cdn.example.com/x.css">'
        '<script src="app.js"></script><script>inline()</script>'
    )
    assert len(external_references(html)) == 2
    assert not is_self_contained(html)
    assert is_self_contained("<style>p{}</style><script>1</script>")


def test_workflow_marker_shape():
    assert workflow_marker(WorkflowStage.PLAN_STRUCTURE, StepStatus.IN_PROGRESS) == {
        "step": 2, "stepName": "File Structure Generation", "status": "in-progress",
    }
    assert workflow_marker(WorkflowStage.MODIFY_FILE, StepStatus.ERROR, {"x": 1})["data"] == {"x": 1}
