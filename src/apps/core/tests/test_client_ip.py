# apps/core/tests/test_client_ip.py
"""
Tests for client address resolution
"""

from django.test import RequestFactory, override_settings

from common.middleware import get_client_ip


def make_request(forwarded_for=None, remote_addr='10.0.0.1'):
    extra = {'REMOTE_ADDR': remote_addr}
    if forwarded_for is not None:
        extra['HTTP_X_FORWARDED_FOR'] = forwarded_for
    return RequestFactory().get('/', **extra)


class TestGetClientIp:

    def test_remote_addr_without_proxies(self):
        assert get_client_ip(make_request()) == '10.0.0.1'

    @override_settings(TRUSTED_PROXY_COUNT=0)
    def test_forwarded_for_ignored_without_proxies(self):
        assert get_client_ip(make_request('203.0.113.7')) == '10.0.0.1'

    @override_settings(TRUSTED_PROXY_COUNT=1)
    def test_one_proxy_takes_rightmost_hop(self):
        request = make_request('198.51.100.1, 203.0.113.7', remote_addr='172.16.0.2')

        assert get_client_ip(request) == '203.0.113.7'

    @override_settings(TRUSTED_PROXY_COUNT=2)
    def test_two_proxies_skip_inner_hop(self):
        request = make_request('198.51.100.1, 203.0.113.7, 172.16.0.9', remote_addr='172.16.0.2')

        assert get_client_ip(request) == '203.0.113.7'

    @override_settings(TRUSTED_PROXY_COUNT=2)
    def test_short_chain_falls_back_to_remote_addr(self):
        assert get_client_ip(make_request('203.0.113.7')) == '10.0.0.1'

    @override_settings(TRUSTED_PROXY_COUNT=1)
    def test_missing_header_falls_back_to_remote_addr(self):
        assert get_client_ip(make_request()) == '10.0.0.1'
