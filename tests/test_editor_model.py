"""
Editor model tests: block ids, ordering, partial updates, selection and
the default content/style of every block type.
Run with: pytest tests/test_editor_model.py -v
"""

import itertools

import pytest

from mailforge.editor import (
    BlockNotFoundError, BlockValidationError, UnknownBlockTypeError,
)
from mailforge.modules.automations.nodes import WORKFLOW_REGISTRY, AutomationDocument
from mailforge.modules.campaigns.blocks import (
    EMAIL_REGISTRY, WELCOME_TEXT, CampaignDocument, new_campaign_document,
)
from mailforge.modules.landing_pages.sections import (
    PAGE_REGISTRY, LandingPageDocument, new_landing_page_document,
)


# ---------------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------------

def test_ids_unique_over_rapid_adds():
    doc = CampaignDocument()
    types = itertools.cycle(EMAIL_REGISTRY.types)
    ids = [doc.add_block(next(types)) for _ in range(200)]
    assert len(set(ids)) == 200
    assert doc.blocks.ids == ids


def test_duplicate_id_from_factory_is_rejected():
    doc = CampaignDocument(id_factory=lambda: "fixed-id")
    doc.add_block("text")

    with pytest.raises(BlockValidationError):
        doc.add_block("image")

    assert doc.blocks.ids == ["fixed-id"]
    assert doc.blocks.get("fixed-id").type == "text"


def test_unknown_block_type_leaves_document_unchanged():
    doc = new_campaign_document()
    before = doc.blocks.ids

    with pytest.raises(UnknownBlockTypeError):
        doc.add_block("video")

    assert doc.blocks.ids == before


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def test_list_document_preserves_insertion_order():
    doc = CampaignDocument()
    ids = [doc.add_block(t) for t in ("text", "image", "button", "divider", "spacer")]
    assert [b.type for b in doc.blocks] == ["text", "image", "button", "divider", "spacer"]
    assert doc.blocks.ids == ids


def test_list_document_rejects_position():
    doc = CampaignDocument()
    with pytest.raises(BlockValidationError):
        doc.add_block("text", position={"x": 10, "y": 10})
    assert len(doc) == 0


def test_move_block_clamps_index():
    doc = CampaignDocument()
    a, b, c = (doc.add_block(t) for t in ("text", "image", "button"))

    doc.move_block(c, 0)
    assert doc.blocks.ids == [c, a, b]

    doc.move_block(c, 99)
    assert doc.blocks.ids == [a, b, c]


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------

def test_partial_style_update_keeps_siblings_and_other_blocks():
    doc = CampaignDocument()
    first = doc.add_block("text")
    second = doc.add_block("text")
    untouched = doc.blocks.get(second)

    doc.update_block(first, style={"color": "#ff0000"})

    block = doc.blocks.get(first)
    assert block.style.color == "#ff0000"
    assert block.style.font_size == "16px"
    assert block.style.text_align == "left"
    assert block.content.text == "Your text here..."
    assert doc.blocks.get(second) == untouched


def test_update_missing_block_raises_and_changes_nothing():
    doc = new_campaign_document()
    before = list(doc.blocks)

    with pytest.raises(BlockNotFoundError):
        doc.update_block("does-not-exist", content={"text": "x"})

    assert list(doc.blocks) == before


def test_invalid_update_is_rejected_whole():
    doc = AutomationDocument()
    node_id = doc.add_block("action")

    with pytest.raises(BlockValidationError):
        doc.update_block(node_id, content={"email_id": "email_1", "delay": -5})

    node = doc.blocks.get(node_id)
    assert node.content.email_id == ""
    assert node.content.delay == 0


def test_block_type_and_id_cannot_change():
    doc = CampaignDocument()
    block_id = doc.add_block("text")

    with pytest.raises(BlockValidationError):
        doc.update_block(block_id, type="image")
    with pytest.raises(BlockValidationError):
        doc.update_block(block_id, id="other")

    assert doc.blocks.get(block_id).type == "text"


def test_commit_inline_text():
    doc = new_campaign_document()
    block_id = doc.blocks.ids[0]

    doc.commit_inline_text(block_id, "Hello again")

    block = doc.blocks.get(block_id)
    assert block.content.text == "Hello again"
    assert block.style.font_size == "24px"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def test_deleting_selected_block_clears_selection():
    doc = CampaignDocument()
    a = doc.add_block("text")
    b = doc.add_block("image")
    doc.select(a)

    doc.delete_block(b)
    assert doc.selection.selected_id == a

    doc.delete_block(a)
    assert doc.selection.selected_id is None


def test_select_missing_block_raises():
    doc = new_campaign_document()
    with pytest.raises(BlockNotFoundError):
        doc.select("nope")
    assert doc.selection.selected_id is None


def test_select_none_clears():
    doc = new_landing_page_document()
    assert doc.selection.selected_id is not None
    doc.select(None)
    assert doc.selection.selected_id is None


def test_auto_select_policies():
    campaign = CampaignDocument()
    campaign.add_block("text")
    assert campaign.selection.selected_id is None

    page = LandingPageDocument()
    first = page.add_block("hero")
    assert page.selection.selected_id == first
    second = page.add_block("cta")
    assert page.selection.selected_id == second

    workflow = AutomationDocument()
    trigger = workflow.add_block("trigger")
    workflow.add_block("action")
    assert workflow.selection.selected_id == trigger


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("registry", [EMAIL_REGISTRY, WORKFLOW_REGISTRY, PAGE_REGISTRY],
                         ids=lambda r: r.name)
def test_every_block_type_has_complete_defaults(registry):
    for block_type in registry.types:
        content, style = registry.defaults(block_type)
        block = registry.create(block_type, block_id="b1")
        assert block.type == block_type
        assert block.content.model_dump() == content
        assert block.style.model_dump() == style


def test_email_defaults():
    assert EMAIL_REGISTRY.defaults("text") == (
        {"text": "Your text here..."},
        {"font_size": "16px", "color": "#333333", "text_align": "left", "font_weight": "normal"},
    )
    content, style = EMAIL_REGISTRY.defaults("button")
    assert content == {"text": "Click Here", "url": "#"}
    assert style["background_color"] == "#dc2626"
    assert style["border_radius"] == "6px"
    assert EMAIL_REGISTRY.defaults("divider")[0] == {}
    assert EMAIL_REGISTRY.defaults("spacer") == ({"height": "20px"}, {"height": "20px"})


def test_workflow_and_page_defaults():
    assert WORKFLOW_REGISTRY.defaults("delay")[0] == {"duration": 1, "unit": "days"}
    assert WORKFLOW_REGISTRY.defaults("trigger")[0]["event"] == "subscribe"
    assert WORKFLOW_REGISTRY.create("condition").title == "If/Then"

    content, style = PAGE_REGISTRY.defaults("form")
    assert content["fields"] == ["email"]
    assert content["success_message"] == "Thank you for subscribing!"
    assert style["background_color"] == "#f9fafb"
    assert len(PAGE_REGISTRY.defaults("features")[0]["features"]) == 3


def test_unknown_type_defaults_are_empty():
    assert EMAIL_REGISTRY.defaults("video") == ({}, {})


def test_new_documents_are_seeded():
    campaign = new_campaign_document()
    assert len(campaign) == 1
    block = next(iter(campaign.blocks))
    assert block.content.text == WELCOME_TEXT
    assert block.style.font_weight == "bold"

    page = new_landing_page_document()
    hero = page.selection.selected
    assert hero.type == "hero"
    assert hero.content.headline == "Transform Your Business Today"


# ---------------------------------------------------------------------------
# Metadata / status / copies
# ---------------------------------------------------------------------------

def test_slug_is_normalised():
    page = LandingPageDocument()
    page.update_metadata(slug="Spring Sale 2024!")
    assert page.metadata.slug == "spring-sale-2024"

    with pytest.raises(BlockValidationError):
        page.update_metadata(slug="!!!")
    assert page.metadata.slug == "spring-sale-2024"


def test_invalid_status_rejected():
    doc = CampaignDocument()
    with pytest.raises(BlockValidationError):
        doc.set_status("published")
    assert doc.status == "draft"


def test_copy_is_independent():
    doc = new_campaign_document()
    snapshot = doc.copy()

    doc.add_block("button")
    doc.update_metadata(subject="Changed")

    assert len(snapshot) == 1
    assert snapshot.metadata.subject == ""
