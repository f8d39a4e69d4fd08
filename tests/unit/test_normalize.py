from search_core.retrieval.normalize import from_box, from_confluence, from_sharepoint


def test_confluence_strips_html_and_truncates_excerpt() -> None:
    result = {
        "content": {
            "id": "123",
            "title": "EKS upgrade",
            "space": {"key": "OPS"},
            "body": {"view": {"value": "<p>  Upgrade <b>control plane</b></p>" + "y" * 300}},
            "_links": {"webui": "/spaces/OPS/pages/123/EKS+upgrade"},
        }
    }

    hit = from_confluence(result, domain="acme.atlassian.net")

    assert hit.source == "Confluence"
    assert hit.title == "EKS upgrade"
    assert hit.url == "https://acme.atlassian.net/wiki/spaces/OPS/pages/123/EKS+upgrade"
    assert hit.metadata == "Space: OPS"
    assert hit.excerpt.startswith("Upgrade control plane")
    assert len(hit.excerpt) <= 200
    assert "<" not in hit.excerpt


def test_confluence_url_and_title_fallbacks() -> None:
    absolute = from_confluence({"content": {"_links": {"webui": "https://wiki.example.com/x"}}})
    by_id = from_confluence({"content": {"id": "9"}}, domain="acme.atlassian.net")
    bare = from_confluence({})

    assert absolute.url == "https://wiki.example.com/x"
    assert absolute.title == "Untitled"
    assert by_id.url == "https://acme.atlassian.net/wiki/spaces/Unknown/pages/9"
    assert bare.url == ""
    assert bare.metadata == "Space: Unknown"


def test_sharepoint_hit() -> None:
    hit = from_sharepoint(
        {
            "summary": "  Runbook for <ddd/>EKS " + "z" * 400,
            "resource": {
                "name": "eks-runbook.docx",
                "webUrl": "https://acme.sharepoint.com/eks-runbook.docx",
                "file": {"mimeType": "application/msword"},
            },
        }
    )

    assert hit.title == "eks-runbook.docx"
    assert hit.url == "https://acme.sharepoint.com/eks-runbook.docx"
    assert hit.metadata == "Type: application/msword"
    assert hit.excerpt.startswith("Runbook for")
    assert len(hit.excerpt) <= 200
    assert from_sharepoint({"resource": {}}).metadata == "Type: Unknown"


def test_box_entry() -> None:
    hit = from_box({"id": "555", "name": "eks.pdf", "description": "w" * 250, "size": 1536})

    assert hit.source == "Box"
    assert hit.url == "https://app.box.com/file/555"
    assert hit.metadata == "Size: 1.50 KB"
    assert hit.excerpt == "w" * 200
    assert from_box({"id": "1"}).title == "Untitled"
    assert from_box({"id": "1"}).metadata == "Size: 0.00 KB"
