"""Tests for connection string parsing and URI resolution."""

import pytest

from azure_oss_storage import InvalidConnectionStringError
from azure_oss_storage.blob._core import resolve_connection_string
from azure_oss_storage.common.connection_string import (
    DEVELOPMENT_ACCOUNT_KEY,
    get_connection_info,
    parse_connection_string,
)


class TestParseConnectionString:
    def test_values_may_contain_equals(self):
        settings = parse_connection_string("AccountName=acct;AccountKey=abc==;")
        assert settings == {"AccountName": "acct", "AccountKey": "abc=="}

    def test_invalid_segment(self):
        with pytest.raises(InvalidConnectionStringError):
            parse_connection_string("AccountName=acct;garbage")


class TestGetConnectionInfo:
    def test_account_key(self, mock_env_clear, mock_connection_string, mock_account_key):
        info = get_connection_info(mock_connection_string)

        assert info.blob_endpoint == "https://acct.blob.core.windows.net"
        assert info.credential.account_name == "acct"
        assert info.credential.account_key == mock_account_key
        assert info.sas_token is None

    def test_http_protocol_and_custom_suffix(self, mock_env_clear):
        info = get_connection_info(
            "DefaultEndpointsProtocol=http;AccountName=acct;AccountKey=a2V5;"
            "EndpointSuffix=core.chinacloudapi.cn"
        )
        assert info.blob_endpoint == "http://acct.blob.core.chinacloudapi.cn"

    def test_explicit_blob_endpoint(self, mock_env_clear):
        info = get_connection_info(
            "AccountName=acct;AccountKey=a2V5;BlobEndpoint=http://localhost:10000/acct/"
        )
        assert info.blob_endpoint == "http://localhost:10000/acct"
        assert info.credential is not None

    def test_development_storage(self, mock_env_clear):
        info = get_connection_info("UseDevelopmentStorage=true")

        assert info.blob_endpoint == "http://127.0.0.1:10000/devstoreaccount1"
        assert info.credential.account_name == "devstoreaccount1"
        assert info.credential.account_key == DEVELOPMENT_ACCOUNT_KEY

    def test_sas_only(self, mock_env_clear):
        info = get_connection_info(
            "BlobEndpoint=https://acct.blob.core.windows.net;SharedAccessSignature=?sv=1&sig=x"
        )
        assert info.credential is None
        assert info.sas_token == "sv=1&sig=x"

    def test_from_environment(self, mock_env_clear, monkeypatch, mock_connection_string):
        monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", mock_connection_string)
        assert get_connection_info().blob_endpoint == "https://acct.blob.core.windows.net"

    def test_missing(self, mock_env_clear):
        with pytest.raises(InvalidConnectionStringError, match="AZURE_STORAGE_CONNECTION_STRING"):
            get_connection_info()

    def test_key_without_account(self, mock_env_clear):
        with pytest.raises(InvalidConnectionStringError, match="AccountName"):
            get_connection_info("AccountKey=a2V5;BlobEndpoint=https://h")

    def test_no_endpoint(self, mock_env_clear):
        with pytest.raises(InvalidConnectionStringError, match="BlobEndpoint"):
            get_connection_info("SharedAccessSignature=sv=1")

    def test_is_value_error(self):
        assert issubclass(InvalidConnectionStringError, ValueError)


class TestResolveConnectionString:
    def test_container_uri(self, mock_env_clear, mock_connection_string):
        uri, credential = resolve_connection_string(mock_connection_string, "photos")
        assert uri == "https://acct.blob.core.windows.net/photos"
        assert credential.account_name == "acct"

    def test_blob_uri_with_sas(self, mock_env_clear):
        uri, credential = resolve_connection_string(
            "BlobEndpoint=https://acct.blob.core.windows.net;SharedAccessSignature=sv=1&sig=x",
            "photos",
            "a b.txt",
        )
        assert uri == "https://acct.blob.core.windows.net/photos/a%20b.txt?sv=1&sig=x"
        assert credential is None

    def test_development_storage(self, mock_env_clear):
        uri, _ = resolve_connection_string("UseDevelopmentStorage=true", "photos")
        assert uri == "http://127.0.0.1:10000/devstoreaccount1/photos"
