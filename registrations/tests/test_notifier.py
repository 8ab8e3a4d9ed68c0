"""
Unit tests for the VK notification transport.
"""
from unittest.mock import patch, Mock

import pytest
import httpx

from registrations.services.notifier import notify, send_notification


def _response(status_code, body):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    return response


class TestSendNotification:
    """Tests for send_notification."""

    @patch('registrations.services.notifier.httpx.post')
    def test_request_shape(self, mock_post):
        mock_post.return_value = _response(200, {'response': [{'user_id': 42, 'status': True}]})

        send_notification('42', 'Hello')

        mock_post.assert_called_once()
        call_args, call_kwargs = mock_post.call_args
        assert call_args[0] == 'https://vk.example.test/method/notifications.sendMessage'
        assert call_kwargs['data'] == {
            'access_token': 'vk-token',
            'v': '5.199',
            'user_ids': '42',
            'message': 'Hello',
        }
        assert call_kwargs['timeout'] > 0

    @patch('registrations.services.notifier.httpx.post')
    def test_timeout_propagates(self, mock_post):
        mock_post.side_effect = httpx.TimeoutException('Request timeout')
        with pytest.raises(httpx.TimeoutException):
            send_notification('42', 'Hello')


class TestNotify:
    """notify() turns every transport outcome into a DeliveryResult."""

    @patch('registrations.services.notifier.httpx.post')
    def test_success(self, mock_post):
        mock_post.return_value = _response(200, {'response': [{'user_id': 42, 'status': True}]})
        result = notify('42', 'Hello')
        assert result.succeeded is True
        assert result.error is None

    @patch('registrations.services.notifier.httpx.post')
    def test_vk_error_object(self, mock_post):
        mock_post.return_value = _response(200, {
            'error': {'error_code': 15, 'error_msg': 'Access denied'}
        })
        result = notify('42', 'Hello')
        assert result.succeeded is False
        assert 'Access denied' in result.error

    @patch('registrations.services.notifier.httpx.post')
    def test_per_user_status_false(self, mock_post):
        mock_post.return_value = _response(200, {
            'response': [{'user_id': 42, 'status': False, 'error': {'code': 1, 'description': 'notifications disabled'}}]
        })
        result = notify('42', 'Hello')
        assert result.succeeded is False
        assert result.error == 'notifications disabled'

    @patch('registrations.services.notifier.httpx.post')
    def test_http_error_status(self, mock_post):
        mock_post.return_value = _response(502, {})
        result = notify('42', 'Hello')
        assert result.succeeded is False
        assert result.error == 'HTTP 502'

    @patch('registrations.services.notifier.httpx.post')
    def test_malformed_body(self, mock_post):
        response = _response(200, None)
        response.json.side_effect = ValueError('not json')
        mock_post.return_value = response
        assert notify('42', 'Hello').succeeded is False

    @patch('registrations.services.notifier.httpx.post')
    def test_timeout_is_failure(self, mock_post):
        mock_post.side_effect = httpx.TimeoutException('Request timeout')
        result = notify('42', 'Hello')
        assert result.succeeded is False
        assert 'timeout' in result.error.lower()

    @patch('registrations.services.notifier.httpx.post')
    def test_connection_error_is_failure(self, mock_post):
        mock_post.side_effect = httpx.ConnectError('Connection refused')
        assert notify('42', 'Hello').succeeded is False
