import pytest

from mockstream.config import CollectionConfig, InteractionConfig
from mockstream.store import CollectionStore, cosine_similarity, signature


@pytest.fixture
def store():
    collection = CollectionConfig(
        id="kb",
        interactions=[
            InteractionConfig(
                id="pricing",
                title="Pricing",
                input="How much does the pro plan cost?",
                output="The Pro plan costs $20 per month.",
            ),
            InteractionConfig(
                id="refunds",
                input="Can I get a refund on my order?",
                output="Refunds are available within 30 days.",
            ),
        ],
    )
    return CollectionStore([collection], threshold=0.15)


def test_signature_ignores_case_and_spacing():
    assert signature("How  much\tdoes it COST ") == signature("how much does it cost")
    assert signature("a") != signature("b")


def test_cosine_similarity():
    assert cosine_similarity("pro plan", "pro plan") == pytest.approx(1.0)
    assert cosine_similarity("pro plan", "refund order") == 0.0
    assert cosine_similarity("", "anything") == 0.0


def test_exact_match(store):
    match = store.lookup("kb", "how much does   the PRO plan cost?")
    assert match is not None
    assert match.interaction.id == "pricing"
    assert match.similarity == 1.0


def test_similarity_match(store):
    match = store.lookup("kb", "what does the pro plan cost")
    assert match is not None
    assert match.interaction.id == "pricing"
    assert 0.15 <= match.similarity < 1.0


def test_no_match(store):
    assert store.lookup("kb", "tell me something funny") is None


def test_threshold_is_respected(store):
    strict = CollectionStore([store.get("kb")], threshold=0.95)
    assert strict.lookup("kb", "what does the pro plan cost") is None


def test_unknown_collection(store):
    assert "nope" not in store
    assert len(store) == 1
    with pytest.raises(KeyError):
        store.lookup("nope", "hello")
