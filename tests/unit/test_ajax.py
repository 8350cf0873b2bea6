"""
Unit tests for the AJAX request helpers.
All HTTP traffic is mocked with responses.
"""

import json
from unittest.mock import Mock

import pytest
import requests
import responses

from translations.ajax import (
    AjaxMethod,
    ajax_request,
    handle_ajax_error,
    string_to_ajax_method,
    validate_ajax_response,
)
from translations.alerts import AlertIcon

URL = 'https://example.com/api/items/'


def make_response(status=200, body=b''):
    response = requests.Response()
    response.status_code = status
    response._content = body
    return response


@pytest.mark.unit
class TestStringToAjaxMethod:
    """Test cases for string_to_ajax_method."""

    def test_none_is_get(self):
        assert string_to_ajax_method(None) is AjaxMethod.GET

    @pytest.mark.parametrize('name', ['GET', 'HEAD', 'POST', 'PATCH', 'PUT', 'DELETE'])
    def test_known_methods(self, name):
        assert string_to_ajax_method(name).value == name

    @pytest.mark.parametrize('name', ['', 'get', 'OPTIONS'])
    def test_unknown_method_raises(self, name):
        with pytest.raises(ValueError):
            string_to_ajax_method(name)


@pytest.mark.unit
class TestAjaxRequest:
    """Test cases for ajax_request."""

    @pytest.mark.parametrize('method', ['GET', 'HEAD'])
    def test_payload_not_allowed_for_safe_methods(self, method):
        with pytest.raises(ValueError, match='Payload unacceptable'):
            ajax_request(method, URL, done=Mock(), payload={'a': 1})

    @pytest.mark.parametrize('url', ['', '  ', None])
    def test_url_required(self, url):
        with pytest.raises(ValueError, match='URL not specified.'):
            ajax_request('GET', url, done=Mock())

    def test_success_calls_done_then_always(self, mock_translations_api):
        mock_translations_api.add('GET', URL, json={'success': True, 'items': [1, 2]}, status=200)
        calls = []
        done = Mock(side_effect=lambda *args: calls.append('done'))
        fail = Mock()
        always = Mock(side_effect=lambda: calls.append('always'))

        response = ajax_request('GET', URL, done=done, fail=fail, always=always)

        assert response.status_code == 200
        data, status, _ = done.call_args.args
        assert data == {'success': True, 'items': [1, 2]}
        assert status == 200
        fail.assert_not_called()
        assert calls == ['done', 'always']

    def test_post_sends_json_payload(self, mock_translations_api):
        mock_translations_api.add('POST', URL, json={'success': True}, status=201)

        ajax_request('POST', URL, done=Mock(), payload={'name': 'x'}, content_type='json')

        request = mock_translations_api.calls[0].request
        assert request.headers['Content-Type'] == 'application/json'
        assert json.loads(request.body) == {'name': 'x'}

    def test_payload_defaults_to_form_content_type(self, mock_translations_api):
        mock_translations_api.add('PUT', URL, json={'success': True}, status=200)

        ajax_request(AjaxMethod.PUT, URL, done=Mock(), payload={'name': 'x'})

        request = mock_translations_api.calls[0].request
        assert request.headers['Content-Type'] == 'application/x-www-form-urlencoded'

    def test_http_error_goes_to_fail(self, mock_translations_api):
        mock_translations_api.add('GET', URL, body='Server exploded', status=500)
        done = Mock()
        fail = Mock()
        always = Mock()

        ajax_request('GET', URL, done=done, fail=fail, always=always)

        done.assert_not_called()
        error, status, response = fail.call_args.args
        assert error == 'Server exploded'
        assert status == 500
        assert response.status_code == 500
        always.assert_called_once()

    def test_undecodable_body_goes_to_fail(self, mock_translations_api):
        mock_translations_api.add('GET', URL, body='<html></html>', status=200)
        done = Mock()
        fail = Mock()

        ajax_request('GET', URL, done=done, fail=fail)

        done.assert_not_called()
        error, status, _ = fail.call_args.args
        assert isinstance(error, ValueError)
        assert status == 200

    def test_exception_in_done_goes_to_fail(self, mock_translations_api):
        mock_translations_api.add('GET', URL, json={'success': True}, status=200)
        fail = Mock()
        always = Mock()

        ajax_request('GET', URL, done=Mock(side_effect=KeyError('items')), fail=fail, always=always)

        error, status, _ = fail.call_args.args
        assert isinstance(error, KeyError)
        assert status == 200
        always.assert_called_once()

    def test_transport_error_goes_to_fail(self, mock_translations_api):
        mock_translations_api.add('GET', URL, body=requests.exceptions.ConnectionError('refused'))
        fail = Mock()

        response = ajax_request('GET', URL, done=Mock(), fail=fail)

        assert response is None
        error, status, resp = fail.call_args.args
        assert 'refused' in error
        assert status is None
        assert resp is None

    def test_without_fail_errors_are_alerted(self, mock_translations_api, alert_recorder):
        mock_translations_api.add('GET', URL, json={'error': 'Item not found.'}, status=404)

        ajax_request('GET', URL, done=Mock(), alert=alert_recorder)

        assert [a.message for a in alert_recorder.alerts] == ['Item not found.']

    def test_uses_given_session(self, mock_translations_api):
        mock_translations_api.add('GET', URL, json={'success': True}, status=200)
        session = requests.Session()
        session.headers['X-Test'] = 'yes'

        ajax_request('GET', URL, done=Mock(), session=session)

        assert mock_translations_api.calls[0].request.headers['X-Test'] == 'yes'


@pytest.mark.unit
class TestValidateAjaxResponse:
    """Test cases for validate_ajax_response."""

    def test_valid_response(self, alert_recorder):
        assert validate_ajax_response({'success': True}, 200, None, alert=alert_recorder) is True
        assert alert_recorder.alerts == []

    def test_non_object_is_unexpected(self, alert_recorder):
        assert validate_ajax_response('ok', 200, None, alert=alert_recorder) is False

        alert = alert_recorder.alerts[0]
        assert alert.message == 'Unexpected response from server.'
        assert alert.icon is AlertIcon.WARNING

    def test_error_key(self, alert_recorder):
        assert validate_ajax_response({'error': 'Nope.'}, 200, None, alert=alert_recorder) is False
        assert alert_recorder.alerts[0].message == 'Nope.'

    def test_missing_success_key(self, alert_recorder):
        assert validate_ajax_response({'items': []}, 200, None, alert=alert_recorder) is False
        assert alert_recorder.alerts[0].message == 'No response from server.'

    def test_success_key_optional(self, alert_recorder):
        assert validate_ajax_response({'items': []}, 200, None, no_success_key=True) is True

    def test_no_alert(self, alert_recorder):
        validate_ajax_response({'error': 'Nope.'}, 200, None, no_alert=True, alert=alert_recorder)

        assert alert_recorder.alerts == []

    def test_redirect(self):
        redirect = Mock()

        validate_ajax_response({'success': True, 'redirect': '/next/'}, 200, None, redirect=redirect)

        redirect.assert_called_once_with('/next/')


@pytest.mark.unit
class TestHandleAjaxError:
    """Test cases for handle_ajax_error message precedence."""

    def test_body_error_first(self, alert_recorder):
        response = make_response(400, b'{"error": "Name is required."}')

        assert handle_ajax_error('Bad Request', 400, response, alert=alert_recorder) == 'Name is required.'
        assert alert_recorder.alerts[0].message == 'Name is required.'

    def test_text_second(self):
        response = make_response(502, b'Bad gateway')

        assert handle_ajax_error('Bad gateway', 502, response) == 'Bad gateway'

    def test_status_third(self):
        assert handle_ajax_error('', 503, make_response(503)) == 'Code 503 error.'

    def test_unknown_last(self):
        assert handle_ajax_error('', None, None) == 'Unknown error.'

    def test_prefix_and_no_alert(self, alert_recorder):
        handle_ajax_error('Boom', 500, None, no_alert=True, error_prefix='Save', alert=alert_recorder)

        assert alert_recorder.alerts == []
