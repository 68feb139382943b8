"""
Tests for the curated, CPCB and OpenAQ source adapters.
"""
import json
from unittest import mock

import pytest
import requests

from apps.adapters.base import AUTO_DISABLE_THRESHOLD
from apps.adapters.cpcb import CPCBFeedAdapter
from apps.adapters.curated import CuratedStationsAdapter
from apps.adapters.models import AdapterStatus
from apps.adapters.openaq import OpenAQAdapter
from apps.core.exceptions import SourceUnavailable

CPCB_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<AqIndex>
  <Country id="India">
    <State id="Delhi">
      <City id="Delhi">
        <Station id="Mandir Marg, Delhi - DPCC" lastupdate="18-10-2026 10:00:00"
                 latitude="28.636429" longitude="77.201067">
          <Pollutant_Index id="PM2.5" Min="60" Max="120" Avg="88"/>
          <Pollutant_Index id="PM10" Min="120" Max="240" Avg="182"/>
          <Pollutant_Index id="OZONE" Min="10" Max="50" Avg="36"/>
          <Pollutant_Index id="NH3" Min="2" Max="6" Avg="4"/>
          <Air_Quality_Index Value="182" Predominant_Parameter="PM10"/>
        </Station>
        <Station id="Lodhi Road, Delhi - IMD" lastupdate="18-10-2026 10:00:00"
                 latitude="28.591825" longitude="77.227307">
          <Pollutant_Index id="PM2.5" Min="NA" Max="NA" Avg="NA"/>
          <Pollutant_Index id="PM10" Min="80" Max="150" Avg="120"/>
        </Station>
        <Station id="Broken" lastupdate="" latitude="" longitude="77.1"/>
      </City>
    </State>
  </Country>
</AqIndex>
"""

OPENAQ_RESPONSE = {
    'results': [{
        'location': 'Marylebone Road',
        'city': 'London',
        'coordinates': {'latitude': 51.5225, 'longitude': -0.1546},
        'measurements': [
            {'parameter': 'pm25', 'value': 44.6, 'lastUpdated': '2026-10-18T04:00:00Z'},
            {'parameter': 'pm10', 'value': 71.2, 'lastUpdated': '2026-10-18T04:00:00Z'},
            {'parameter': 'bc', 'value': 1.1, 'lastUpdated': '2026-10-18T04:00:00Z'},
            {'parameter': 'no2', 'value': None},
        ],
    }]
}


class KeyedOpenAQAdapter(OpenAQAdapter):
    REQUIRES_API_KEY = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.api_key = 'openaq-key'


def mock_session(payload=None, text=None, error=None):
    session = mock.Mock(spec=requests.Session)
    if error is not None:
        session.request.side_effect = error
        return session

    response = mock.Mock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    response.text = text
    session.request.return_value = response
    return session


class TestCuratedStationsAdapter:

    def test_bundled_dataset(self):
        stations = CuratedStationsAdapter().fetch_all()

        assert len(stations) == 8
        mandir_marg = stations[0]
        assert mandir_marg.id == 'Mandir Marg, Delhi - DPCC'
        assert mandir_marg.authoritative_aqi == 182
        assert mandir_marg.pollutants['pm25'] == 88
        assert mandir_marg.pollutants['o3'] == 36
        assert mandir_marg.last_updated is not None

    def test_station_without_data(self):
        stations = {s.id: s for s in CuratedStationsAdapter().fetch_all()}

        vasundhara = stations['Vasundhara, Ghaziabad - UPPCB']
        assert vasundhara.authoritative_aqi is None
        assert vasundhara.pollutants == {}
        assert vasundhara.effective_aqi == 0

    def test_malformed_rows_are_skipped(self, tmp_path):
        path = tmp_path / 'stations.json'
        path.write_text(json.dumps([
            {'station_id': 'No coordinates', 'aqi': '100'},
            {'station_id': 'Bad latitude', 'latitude': 'north', 'longitude': '77.2'},
            {'station_id': 'Good', 'latitude': '28.6', 'longitude': '77.2', 'aqi': '101.0'},
        ]))

        stations = CuratedStationsAdapter(path=str(path), url='').fetch_all()

        assert [s.id for s in stations] == ['Good']
        assert stations[0].authoritative_aqi == 101

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            CuratedStationsAdapter(path=str(tmp_path / 'missing.json'), url='').fetch_all()

    def test_not_a_list(self, tmp_path):
        path = tmp_path / 'stations.json'
        path.write_text(json.dumps({'stations': []}))

        with pytest.raises(SourceUnavailable):
            CuratedStationsAdapter(path=str(path), url='').fetch_all()

    @pytest.mark.django_db
    def test_remote_dataset(self):
        session = mock_session(payload=[
            {'station_id': 'Remote', 'latitude': '28.6', 'longitude': '77.2', 'aqi': '150'},
        ])
        adapter = CuratedStationsAdapter(url='https://example.test/stations.json', session=session)

        assert [s.id for s in adapter.fetch_all()] == ['Remote']
        assert session.request.call_args.kwargs['url'] == 'https://example.test/stations.json'


class TestCPCBFeedAdapter:

    def test_parse_stations(self):
        stations = CPCBFeedAdapter().parse_stations(CPCB_FEED)

        assert [s.id for s in stations] == [
            'Mandir Marg, Delhi - DPCC',
            'Lodhi Road, Delhi - IMD',
        ]

        mandir_marg, lodhi_road = stations
        assert mandir_marg.authoritative_aqi == 182
        assert mandir_marg.pollutants == {'pm25': 88.0, 'pm10': 182.0, 'o3': 36.0}
        assert mandir_marg.last_updated.day == 18

        assert lodhi_road.authoritative_aqi is None
        assert lodhi_road.pollutants == {'pm10': 120.0}
        assert lodhi_road.effective_aqi == 120

    def test_malformed_xml(self):
        with pytest.raises(SourceUnavailable):
            CPCBFeedAdapter().parse_stations('<AqIndex><Station')

    @pytest.mark.django_db
    def test_fetch_all(self):
        adapter = CPCBFeedAdapter(session=mock_session(text=CPCB_FEED))
        assert len(adapter.fetch_all()) == 2

    @pytest.mark.django_db
    def test_empty_feed(self):
        adapter = CPCBFeedAdapter(session=mock_session(text='<AqIndex></AqIndex>'))
        with pytest.raises(SourceUnavailable):
            adapter.fetch_all()

    @pytest.mark.django_db
    def test_falls_back_to_local_copy(self, tmp_path):
        copy = tmp_path / 'feed.xml'
        copy.write_text(CPCB_FEED, encoding='utf-8')
        adapter = CPCBFeedAdapter(
            fallback_path=str(copy),
            session=mock_session(error=requests.exceptions.ConnectionError('offline')),
        )

        assert len(adapter.fetch_all()) == 2
        status = AdapterStatus.objects.get(source='CPCB_LIVE')
        assert status.total_failures == 0
        assert status.last_success_at is not None

    @pytest.mark.django_db
    def test_unreadable_local_copy(self, tmp_path):
        adapter = CPCBFeedAdapter(
            fallback_path=str(tmp_path / 'missing.xml'),
            session=mock_session(error=requests.exceptions.ConnectionError('offline')),
        )

        with pytest.raises(SourceUnavailable, match='offline'):
            adapter.fetch_all()
        assert AdapterStatus.objects.get(source='CPCB_LIVE').total_failures == 1

    @pytest.mark.django_db
    def test_no_local_copy(self):
        adapter = CPCBFeedAdapter(
            fallback_path='',
            session=mock_session(error=requests.exceptions.ConnectionError('offline')),
        )

        with pytest.raises(SourceUnavailable) as excinfo:
            adapter.fetch_all()
        assert excinfo.value.source == 'CPCB_LIVE'


class TestOpenAQAdapter:

    def test_normalize(self):
        result = OpenAQAdapter().normalize_data(OPENAQ_RESPONSE, 51.5074, -0.1278)

        assert result['location'] == 'Marylebone Road'
        assert result['city'] == 'London'
        assert result['measurements'] == {'pm25': 45, 'pm10': 71}
        assert result['distance_km'] == pytest.approx(2.6, abs=0.3)
        assert result['last_updated'].hour == 4

    @pytest.mark.parametrize('payload', [
        {},
        {'results': []},
        {'results': [{'location': 'Empty', 'measurements': []}]},
    ])
    def test_nothing_usable(self, payload):
        assert OpenAQAdapter().normalize_data(payload, 51.5, -0.12) is None

    @pytest.mark.django_db
    def test_fetch_near(self):
        session = mock_session(payload=OPENAQ_RESPONSE)
        adapter = OpenAQAdapter(session=session)
        adapter.api_key = 'openaq-key'

        result = adapter.fetch_near(51.5074, -0.1278)

        assert result['measurements']['pm25'] == 45
        kwargs = session.request.call_args.kwargs
        assert kwargs['url'].endswith('/latest')
        assert kwargs['params']['coordinates'] == '51.5074,-0.1278'
        assert kwargs['params']['order_by'] == 'distance'
        assert kwargs['headers'] == {'X-API-Key': 'openaq-key'}

    @pytest.mark.django_db
    def test_http_failure(self):
        adapter = OpenAQAdapter(session=mock_session(error=requests.exceptions.Timeout('slow')))

        with pytest.raises(SourceUnavailable):
            adapter.fetch_near(51.5, -0.12)


@pytest.mark.django_db
class TestAdapterHealth:

    def test_success_and_failure_are_recorded(self):
        adapter = OpenAQAdapter()
        adapter._update_status(success=True)
        adapter._update_status(success=True)
        adapter._update_status(success=False, error_message='HTTP 500')

        status = AdapterStatus.objects.get(source='OPENAQ')
        assert status.total_requests == 3
        assert status.total_failures == 1
        assert status.consecutive_failures == 1
        assert status.status_message == 'HTTP 500'
        assert adapter.is_available()

    def test_auto_disable_after_repeated_failures(self):
        adapter = KeyedOpenAQAdapter()
        for _ in range(AUTO_DISABLE_THRESHOLD):
            adapter._update_status(success=False, error_message='down')

        assert not AdapterStatus.objects.get(source='OPENAQ').is_active
        assert not adapter.is_available()

    def test_unhealthy_keyed_adapter_is_skipped(self):
        adapter = KeyedOpenAQAdapter()
        adapter._update_status(success=False, error_message='HTTP 401')

        assert not adapter.is_available()

    def test_keyed_adapter_without_key(self):
        adapter = KeyedOpenAQAdapter()
        adapter.api_key = None

        assert not adapter.is_available()

    @pytest.mark.parametrize('adapter_class', [CPCBFeedAdapter, OpenAQAdapter])
    def test_keyless_adapter_stays_available_after_failures(self, adapter_class):
        adapter = adapter_class()
        for _ in range(AUTO_DISABLE_THRESHOLD):
            adapter._update_status(success=False, error_message='down')

        assert adapter.is_available()

    def test_unknown_adapter_is_available(self):
        assert CPCBFeedAdapter().is_available()
