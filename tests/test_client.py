import httpx
import pytest

from feedback_collector.client import FeedbackApiError, FeedbackGateway, build_query_params, open_gateway

VALID_PAYLOAD = {
    "name": "Alice Smith",
    "email": "alice@example.com",
    "message": "Gateway round trip works.",
}


def test_build_query_params_omits_falsy_values():
    params = build_query_params(
        {"search": "", "category": "all", "startDate": None, "endDate": "2024-01-31", "page": 2, "limit": 0}
    )
    assert params == {"category": "all", "endDate": "2024-01-31", "page": "2"}


@pytest.mark.asyncio
async def test_create_list_delete(gateway: FeedbackGateway):
    created = await gateway.create_feedback({**VALID_PAYLOAD, "category": "bug"})
    assert created.name == "Alice Smith"
    assert created.category.value == "bug"

    page = await gateway.list_feedback({"category": "bug", "page": 1, "limit": 10})
    assert page.total == 1
    assert page.current_page == 1
    assert page.feedback[0].id == created.id

    message = await gateway.delete_feedback(str(created.id))
    assert message == "Feedback deleted successfully"


@pytest.mark.asyncio
async def test_validation_errors_are_structured(gateway: FeedbackGateway):
    with pytest.raises(FeedbackApiError) as excinfo:
        await gateway.create_feedback({"name": "A", "email": "bad", "message": "short"})
    err = excinfo.value
    assert err.status_code == 400
    assert not err.is_transport_error
    assert set(err.field_errors) == {"name", "email", "message"}
    assert err.message == "Failed to submit feedback"


@pytest.mark.asyncio
async def test_not_found_surfaces_server_message(gateway: FeedbackGateway):
    with pytest.raises(FeedbackApiError) as excinfo:
        await gateway.delete_feedback("00000000-0000-0000-0000-000000000000")
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Feedback not found"


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with open_gateway("http://api.invalid", transport=httpx.MockTransport(refuse)) as gw:
        with pytest.raises(FeedbackApiError) as excinfo:
            await gw.list_feedback()
    assert excinfo.value.is_transport_error
    assert excinfo.value.payload == {}


@pytest.mark.asyncio
async def test_non_json_error_body_gets_generic_message():
    def bad_gateway(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    async with open_gateway("http://api.invalid", transport=httpx.MockTransport(bad_gateway)) as gw:
        with pytest.raises(FeedbackApiError) as excinfo:
            await gw.delete_feedback("abc")
    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Failed to delete feedback"


@pytest.mark.asyncio
async def test_malformed_success_body_is_an_error():
    def wrong_shape(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    async with open_gateway("http://api.invalid", transport=httpx.MockTransport(wrong_shape)) as gw:
        with pytest.raises(FeedbackApiError):
            await gw.list_feedback()
