import pytest
import responses
from responses import matchers

from calaos_home.weather import (
    FORECAST_URL,
    KELVIN_ZERO,
    WEATHER_URL,
    WeatherData,
    WeatherModel,
    convert_temp,
)


class FakeConfig:
    def __init__(self):
        self.options = {"latitude": "48.864715", "longitude": "2.322235"}

    def get_option(self, key):
        return self.options.get(key, "")


BASE_PARAMS = {"lat": "48.864715", "lon": "2.322235", "mode": "json", "APPID": "placeholder"}


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def record(icon="10n", temp=KELVIN_ZERO + 12):
    return {
        "dt": 1700000000,
        "weather": [{"icon": icon, "id": 500, "main": "Rain", "description": "light rain"}],
        "main": {"temp": temp, "temp_min": KELVIN_ZERO - 4, "temp_max": KELVIN_ZERO + 20,
                 "humidity": "44"},
    }


def test_convert_temp_zero():
    assert convert_temp(KELVIN_ZERO) == "0"


def test_convert_temp_offsets():
    assert convert_temp(KELVIN_ZERO + 21) == "21"
    assert convert_temp(KELVIN_ZERO - 4) == "-4"


def test_defaults():
    data = WeatherData()
    assert (data.temperature, data.humidity, data.weather_text) == ("--", "--", "--")
    assert data.weather_code == 0
    assert data.is_night is False


def test_set_weather_data():
    data = WeatherData()
    data.set_weather_data(record())
    assert data.weather_icon == "10n"
    assert data.weather_code == 500
    assert data.weather_text == "Rain"
    assert data.weather_description == "light rain"
    assert (data.temperature, data.temperature_min, data.temperature_max) == ("12", "-4", "20")
    assert data.humidity == "44"
    assert data.is_night is True
    assert data.day_of_week


def test_day_icon_is_not_night():
    data = WeatherData()
    data.set_weather_data(record(icon="01d"))
    assert data.is_night is False


def test_refresh_loads_weather_and_forecast(rsps):
    rsps.get(WEATHER_URL, json=record(), match=[matchers.query_param_matcher(BASE_PARAMS)])
    rsps.get(
        FORECAST_URL,
        json={"list": [record(), record(icon="02d")]},
        match=[matchers.query_param_matcher({**BASE_PARAMS, "cnt": "5"})],
    )
    model = WeatherModel(FakeConfig(), "placeholder")
    model.refresh()
    assert model.weather.temperature == "12"
    assert model.forecast_count() == 2
    assert model.forecast_at(1).weather_icon == "02d"


def test_weather_error_still_fetches_forecast(rsps):
    rsps.get(WEATHER_URL, status=500)
    rsps.get(FORECAST_URL, json={"list": [record()]})
    model = WeatherModel(FakeConfig(), "placeholder")
    model.refresh()
    assert model.weather == WeatherData()
    assert model.forecast_count() == 1


def test_forecast_error_keeps_previous_forecast(rsps):
    rsps.get(WEATHER_URL, json=record())
    rsps.get(FORECAST_URL, json={"list": [record(), record()]})
    model = WeatherModel(FakeConfig(), "placeholder")
    model.refresh()
    rsps.replace(responses.GET, FORECAST_URL, status=503)
    model.refresh()
    assert model.forecast_count() == 2


def test_invalid_forecast_body_clears_forecast(rsps):
    rsps.get(WEATHER_URL, json=record())
    rsps.get(FORECAST_URL, json={"list": [record()]})
    model = WeatherModel(FakeConfig(), "placeholder")
    model.refresh()
    rsps.replace(responses.GET, FORECAST_URL, body="not json")
    model.refresh()
    assert model.forecast_count() == 0


def test_forecast_at_out_of_range():
    model = WeatherModel(FakeConfig(), "placeholder")
    with pytest.raises(IndexError):
        model.forecast_at(0)
    with pytest.raises(IndexError):
        model.forecast_at(-1)