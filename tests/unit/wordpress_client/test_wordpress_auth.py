"""Unit tests for wordpress_client.auth module."""

import pytest
from unittest.mock import patch

from src.wordpress_client.auth import Authenticator, Credentials
from src.wordpress_client.errors import InvalidCredentialsError


def env(**overrides):
    """Build a getenv side effect with complete credentials plus overrides."""
    env_vars = {
        'WORDPRESS_BASE_URL': 'https://example.com/',
        'WORDPRESS_USERNAME': 'admin',
        'WORDPRESS_APPLICATION_PASSWORD': 'abcd efgh ijkl mnop qrst uvwx',
    }
    env_vars.update(overrides)
    return lambda key: env_vars.get(key)


class TestCredentials:
    """Test cases for Credentials NamedTuple."""

    def test_credentials_are_immutable(self):
        creds = Credentials(url="https://example.com", user="admin", application_password="x")
        with pytest.raises(AttributeError):
            creds.url = "different-url"


class TestAuthenticator:
    """Test cases for Authenticator class."""

    @patch('src.wordpress_client.auth.load_dotenv')
    def test_init_loads_dotenv(self, mock_load_dotenv):
        """Authenticator __init__ should call load_dotenv()."""
        Authenticator()
        mock_load_dotenv.assert_called_once()

    @patch('src.wordpress_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_get_credentials_success(self, mock_getenv, mock_load_dotenv):
        """Credentials are returned with the trailing slash stripped from the URL."""
        mock_getenv.side_effect = env()

        creds = Authenticator().get_credentials()

        assert creds.url == 'https://example.com'
        assert creds.user == 'admin'
        assert creds.application_password == 'abcd efgh ijkl mnop qrst uvwx'

    @pytest.mark.parametrize("missing", [
        'WORDPRESS_BASE_URL',
        'WORDPRESS_USERNAME',
        'WORDPRESS_APPLICATION_PASSWORD',
    ])
    @patch('src.wordpress_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_get_credentials_missing_variable(self, mock_getenv, mock_load_dotenv, missing):
        """Any missing variable raises InvalidCredentialsError."""
        mock_getenv.side_effect = env(**{missing: None})

        with pytest.raises(InvalidCredentialsError):
            Authenticator().get_credentials()

    @patch('src.wordpress_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_missing_url_reports_unknown_endpoint(self, mock_getenv, mock_load_dotenv):
        mock_getenv.side_effect = env(WORDPRESS_BASE_URL='')

        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_credentials()
        assert exc_info.value.endpoint == 'unknown'
        assert exc_info.value.user == 'admin'
