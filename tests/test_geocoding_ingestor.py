import httpx
import pytest

from rainalert.errors import GeocodingError, LocationNotFound
from rainalert.ingestors.geocoding import GeocodingClient

GEOCODE_PAYLOAD = {
    "results": [
        {
            "address_components": [
                {"long_name": "RG24 8JZ", "short_name": "RG24 8JZ", "types": ["postal_code"]},
                {"long_name": "Chineham", "short_name": "Chineham", "types": ["route"]},
                {
                    "long_name": "Basingstoke",
                    "short_name": "Basingstoke",
                    "types": ["postal_town"],
                },
            ],
            "formatted_address": "Basingstoke RG24 8JZ, UK",
            "geometry": {"location": {"lat": 51.2831, "lng": -1.0683}},
            "place_id": "abc",
            "types": ["postal_code"],
        }
    ],
    "status": "OK",
}


@pytest.mark.anyio
async def test_geocode_returns_first_result():
    def handler(request: httpx.Request):
        assert request.url.params["address"] == "rg248jz"
        assert request.url.params["key"] == "maps-key"
        return httpx.Response(200, json=GEOCODE_PAYLOAD)

    client = GeocodingClient(
        base_url="https://geo.test", api_key="maps-key", transport=httpx.MockTransport(handler)
    )

    coordinates = await client.geocode("rg248jz")

    assert coordinates.latitude == pytest.approx(51.2831)
    assert coordinates.longitude == pytest.approx(-1.0683)
    assert coordinates.postal_town == "Basingstoke"
    assert coordinates.route == "Chineham"
    assert coordinates.formatted_address == "Basingstoke RG24 8JZ, UK"


@pytest.mark.anyio
async def test_geocode_zero_results_is_not_found():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"results": [], "status": "ZERO_RESULTS"})
    )
    client = GeocodingClient(base_url="https://geo.test", api_key="k", transport=transport)

    with pytest.raises(LocationNotFound):
        await client.geocode("nowhere at all")


@pytest.mark.anyio
async def test_geocode_blank_location_is_not_found():
    client = GeocodingClient(base_url="https://geo.test", api_key="k")

    with pytest.raises(LocationNotFound):
        await client.geocode("   ")


@pytest.mark.anyio
async def test_geocode_denied_request_raises():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200,
            json={"results": [], "status": "REQUEST_DENIED", "error_message": "bad key"},
        )
    )
    client = GeocodingClient(base_url="https://geo.test", api_key="k", transport=transport)

    with pytest.raises(GeocodingError) as exc_info:
        await client.geocode("rg248jz")

    assert not isinstance(exc_info.value, LocationNotFound)


@pytest.mark.anyio
async def test_geocode_http_error_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
    client = GeocodingClient(base_url="https://geo.test", api_key="k", transport=transport)

    with pytest.raises(GeocodingError):
        await client.geocode("rg248jz")


@pytest.mark.anyio
async def test_geocode_timeout_raises():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("timeout", request=request)

    client = GeocodingClient(
        base_url="https://geo.test", api_key="k", transport=httpx.MockTransport(handler)
    )

    with pytest.raises(GeocodingError):
        await client.geocode("rg248jz")
