"""Client workflows end to end against the ASGI app."""
import asyncio

import httpx
import pytest

from cropcast.client import ApiError, ChatWorkflow, CropCastAPI, FarmRegistry, RecommendationWorkflow, SessionStore
from cropcast.client.chat import ERROR_REPLY
from cropcast.client.recommendations import FAILURE_MESSAGE
from cropcast.main import app

pytestmark = pytest.mark.anyio


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
async def api(store):
    async with CropCastAPI(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
        token_provider=lambda: store.access_token,
    ) as client:
        yield client


@pytest.fixture
async def signed_in(api, store):
    return await store.sign_up(api, "grower@example.com", "Harvest2024", full_name="Grace Grower")


@pytest.fixture
async def field(api, signed_in):
    farm = await api.create_farm({"name": "Valley Farm", "location": "Eldoret"})
    return await api.create_field(
        farm.id, {"field_name": "River Plot", "soil_type": "Loamy", "previous_crops": ["Maize", "Beans"]}
    )


async def test_sign_in_builds_session(api, store, signed_in):
    assert store.access_token == signed_in.access_token
    assert signed_in.user.email == "grower@example.com"
    assert signed_in.user.display_name == "Grace Grower"


async def test_bad_credentials(api, store):
    await api.sign_up("grower@example.com", "Harvest2024")
    with pytest.raises(ApiError) as excinfo:
        await store.sign_in(api, "grower@example.com", "wrong-password")
    assert excinfo.value.status_code == 401
    assert store.get_session() is None


async def test_registry_over_http(api, store):
    registry = FarmRegistry(api, store)
    await api.sign_up("grower@example.com", "Harvest2024")
    await store.sign_in(api, "grower@example.com", "Harvest2024")
    assert registry.farms == []
    assert registry.selected is None

    await registry.create_farm({"name": "Valley Farm"})
    assert registry.selected.name == "Valley Farm"

    await registry.delete_farm(registry.selected_id)
    assert registry.farms == []
    assert registry.selected is None
    registry.close()


# ── Recommendations ───────────────────────────────────────────

async def test_recommendations_for_field(api, store, field, gemini, weather):
    workflow = RecommendationWorkflow(api, store)

    recs = await workflow.request(field)

    assert [r.crop for r in recs] == ["Rice", "Barley", "Oats", "Peas", "Canola"]
    assert workflow.loading is False
    assert workflow.error is None
    assert "Soil Type: Loamy" in gemini.prompts[0]
    assert "Previous crops grown: Maize, Beans" in gemini.prompts[0]

    history = await workflow.history(field.id)
    assert sorted(r.crop_type for r in history) == sorted(r.crop for r in recs)


async def test_failed_request_offers_retry(api, store, field, gemini, weather):
    workflow = RecommendationWorkflow(api, store)
    gemini.status_code = 500

    assert await workflow.request(field) == []
    assert workflow.error == FAILURE_MESSAGE
    assert workflow.loading is False

    gemini.status_code = 200
    recs = await workflow.retry()
    assert len(recs) == 5
    assert workflow.error is None


async def test_duplicate_request_ignored_while_in_flight(api, store, field, gemini, weather):
    workflow = RecommendationWorkflow(api, store)

    first, second = await asyncio.gather(workflow.request(field), workflow.request(field))

    assert len(first) == 5
    assert second == []
    assert len(gemini.prompts) == 1
    assert not workflow.is_pending(field.id)


async def test_request_without_session(api, store, field, gemini, weather):
    await store.sign_out()
    workflow = RecommendationWorkflow(api, store)

    assert await workflow.request(field) == []
    assert workflow.error == FAILURE_MESSAGE
    assert gemini.prompts == []


# ── Chat ──────────────────────────────────────────────────────

async def test_chat_send_and_replay(api, store, signed_in, gemini):
    chat = ChatWorkflow(api, store)
    await chat.load_history()
    assert chat.transcript == []
    assert chat.loading_history is False

    gemini.reply_text = "Rotate with legumes."
    chat.input_text = "What follows maize?"
    entry = await chat.send()

    assert entry.text == "Rotate with legumes."
    assert [(e.text, e.is_user) for e in chat.transcript] == [
        ("What follows maize?", True),
        ("Rotate with legumes.", False),
    ]
    assert chat.input_text == ""
    assert chat.can_send

    replay = ChatWorkflow(api, store)
    await replay.load_history()
    assert [e.text for e in replay.transcript] == ["What follows maize?", "Rotate with legumes."]
    assert replay.transcript[0].id.endswith("-user")
    assert replay.transcript[1].id.endswith("-bot")


async def test_chat_ignores_blank_input(api, store, signed_in, gemini):
    chat = ChatWorkflow(api, store)

    assert await chat.send("   ") is None
    assert chat.transcript == []
    assert gemini.prompts == []


async def test_chat_failure_appends_error_reply(api, store, signed_in, gemini):
    chat = ChatWorkflow(api, store)
    gemini.status_code = 500

    entry = await chat.send("Is it going to rain?")

    assert entry.text == ERROR_REPLY
    assert [e.is_user for e in chat.transcript] == [True, False]
    assert chat.pending is False


# ── Unexpected answers ────────────────────────────────────────

def _api_answering(store, status_code, payload):
    def handler(request):
        return httpx.Response(status_code, json=payload)

    return CropCastAPI(
        base_url="http://testserver",
        transport=httpx.MockTransport(handler),
        token_provider=lambda: store.access_token,
    )


async def test_chat_reply_without_response_key(store, signed_in):
    async with _api_answering(store, 200, {"answer": "hi"}) as odd_api:
        chat = ChatWorkflow(odd_api, store)

        entry = await chat.send("hello")

    assert entry.text == ERROR_REPLY
    assert chat.pending is False
    assert len(chat.transcript) == 2


async def test_chat_crash_still_completes_transcript(store, signed_in):
    class CrashingAPI:
        async def send_chat(self, message, token=None):
            raise RuntimeError("renderer bug")

    chat = ChatWorkflow(CrashingAPI(), store)

    with pytest.raises(RuntimeError):
        await chat.send("hello")
    assert chat.pending is False
    assert chat.can_send
    assert [e.text for e in chat.transcript] == ["hello", ERROR_REPLY]


async def test_recommendations_reply_without_list(store, field):
    async with _api_answering(store, 200, {"suggestions": []}) as odd_api:
        workflow = RecommendationWorkflow(odd_api, store)

        assert await workflow.request(field) == []

    assert workflow.error == FAILURE_MESSAGE
    assert workflow.loading is False
    assert not workflow.is_pending(field.id)


async def test_only_one_chat_send_in_flight(api, store, signed_in, gemini):
    chat = ChatWorkflow(api, store)
    gemini.reply_text = "Mulch the beds."

    first, second = await asyncio.gather(chat.send("How do I keep moisture in?"), chat.send("Anything else?"))

    assert first.text == "Mulch the beds."
    assert second is None
    assert len(gemini.prompts) == 1
    assert [e.text for e in chat.transcript] == ["How do I keep moisture in?", "Mulch the beds."]
