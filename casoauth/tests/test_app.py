"""End-to-end tests for :mod:`casoauth`."""

from http import HTTPStatus
from unittest import TestCase, mock
from urllib.parse import urlencode, urlparse, parse_qs

from flask import make_response
import fakeredis

from casoauth.domain import RegisteredClient, Route
from casoauth.factory import create_web_app
from casoauth.routes import register_endpoint
from casoauth.services import datastore
from casoauth.services.transactions import RedisTransactionStore, \
    TransactionStoreError


class TestAuthorizationFlow(TestCase):
    """A client obtains an authorization code for a user."""

    def setUp(self):
        self.redis = fakeredis.FakeStrictRedis(decode_responses=True)
        self.store = RedisTransactionStore(self.redis, prefix='txn:')
        self.app = create_web_app(store=self.store)
        self.app.config['SESSION_COOKIE_SECURE'] = False
        self.app.config['CAS_LOGIN_URL'] = 'https://sso.example/cas/login'
        with self.app.app_context():
            datastore.create_all()
            datastore.save_client(RegisteredClient(
                client_id='acme',
                client_secret='foohashedsecret',
                service_id=r'https://acme\.example/cb',
                name='Acme Widgets',
                bypass_approval_prompt=False
            ))
            datastore.save_client(RegisteredClient(
                client_id='auto',
                service_id=r'https://auto\.example/cb(\?.*)?',
                name='Auto Approved',
                bypass_approval_prompt=True
            ))
        self.user_agent = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            datastore.drop_all()

    def _authorize(self, **params):
        return self.user_agent.get(f'/oauth2.0/authorize?{urlencode(params)}')

    def _callback(self, ticket):
        return self.user_agent.get(
            f'/oauth2.0/callbackAuthorize?{urlencode({"ticket": ticket})}'
        )

    def _transactions(self):
        return self.redis.keys('txn:*')

    def test_approval_flow(self):
        """Client ``acme`` asks for approval before getting the code."""
        response = self._authorize(client_id='acme',
                                   redirect_uri='https://acme.example/cb',
                                   state='xyz')
        self.assertEqual(response.status_code, HTTPStatus.FOUND,
                         'User is redirected to log in')
        target = urlparse(response.headers['Location'])
        self.assertEqual(target.netloc, 'sso.example')
        self.assertEqual(target.path, '/cas/login')
        self.assertEqual(
            parse_qs(target.query)['service'],
            ['http://localhost/oauth2.0/callbackAuthorize']
        )
        self.assertEqual(len(self._transactions()), 1,
                         'Exactly one transaction is in flight')
        self.assertEqual(self.redis.hgetall(self._transactions()[0]), {
            'callbackUrl': 'https://acme.example/cb',
            'serviceName': 'Acme Widgets',
            'bypassApprovalPrompt': 'false',
            'state': 'xyz'
        })

        response = self._callback('ST-123')
        self.assertEqual(response.status_code, HTTPStatus.OK,
                         'User is shown the approval view')
        self.assertNotIn('Location', response.headers)
        page = response.get_data(as_text=True)
        self.assertIn(
            'href="https://acme.example/cb?code=ST-123&amp;state=xyz"', page
        )
        self.assertIn('Acme Widgets', page)
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')
        self.assertEqual(self._transactions(), [],
                         'The transaction is consumed')

    def test_callback_replay(self):
        """The same transaction cannot be used twice."""
        self._authorize(client_id='acme',
                        redirect_uri='https://acme.example/cb')
        response = self._callback('ST-123')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertIn('code=ST-123', response.get_data(as_text=True))

        response = self._callback('ST-123')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        page = response.get_data(as_text=True)
        self.assertIn('invalid_request', page)
        self.assertIn('No authorization request is in progress', page)
        self.assertNotIn('code=ST-123', page)

    def test_bypass_approval(self):
        """An auto-approved client gets the code without an approval view."""
        self._authorize(client_id='auto',
                        redirect_uri='https://auto.example/cb')
        response = self._callback('ST-9')
        self.assertEqual(response.status_code, HTTPStatus.FOUND)
        self.assertEqual(response.headers['Location'],
                         'https://auto.example/cb?code=ST-9')

    def test_redirect_uri_with_query(self):
        """Code and state are appended to an existing query string."""
        self._authorize(client_id='auto',
                        redirect_uri='https://auto.example/cb?lang=en',
                        state='a b')
        response = self._callback('ST-2')
        location = response.headers['Location']
        self.assertEqual(location,
                         'https://auto.example/cb?lang=en&code=ST-2&state=a+b')
        self.assertEqual(location.count('?'), 1)

    def test_latest_authorize_wins(self):
        """A second authorize request on a session replaces the first."""
        self._authorize(client_id='acme',
                        redirect_uri='https://acme.example/cb', state='one')
        self._authorize(client_id='auto',
                        redirect_uri='https://auto.example/cb', state='two')
        self.assertEqual(len(self._transactions()), 1)
        response = self._callback('ST-3')
        self.assertEqual(response.headers['Location'],
                         'https://auto.example/cb?code=ST-3&state=two')

    def test_redirect_uri_mismatch(self):
        """An unregistered redirect URI is rejected without a redirect."""
        response = self._authorize(client_id='acme',
                                   redirect_uri='https://evil.example/cb',
                                   state='xyz')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertNotIn('Location', response.headers,
                         'No login redirect is issued')
        self.assertIn('invalid_request', response.get_data(as_text=True))
        self.assertEqual(self._transactions(), [],
                         'No transaction is created')

    def test_unknown_client(self):
        """An unknown client is rejected, whatever the redirect URI."""
        for redirect_uri in ['https://acme.example/cb',
                             'https://evil.example/cb']:
            response = self._authorize(client_id='ghost',
                                       redirect_uri=redirect_uri)
            self.assertEqual(response.status_code, HTTPStatus.OK)
            self.assertNotIn('Location', response.headers)
            self.assertIn('unauthorized_client',
                          response.get_data(as_text=True))
        self.assertEqual(self._transactions(), [])

    def test_missing_parameters(self):
        """Requests without client_id or redirect_uri are rejected."""
        response = self._authorize(redirect_uri='https://acme.example/cb')
        self.assertIn('Missing client_id', response.get_data(as_text=True))
        response = self._authorize(client_id='acme')
        self.assertIn('Missing redirect_uri',
                      response.get_data(as_text=True))
        self.assertEqual(self._transactions(), [])

    def test_callback_without_authorize(self):
        """A callback with no authorization in progress is rejected."""
        response = self._callback('ST-123')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertNotIn('Location', response.headers)
        self.assertIn('invalid_request', response.get_data(as_text=True))

    def test_strict_error_status(self):
        """The error status code can be configured."""
        self.app.config['ERROR_STATUS_CODE'] = HTTPStatus.BAD_REQUEST
        response = self._authorize(client_id='ghost',
                                   redirect_uri='https://acme.example/cb')
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)

    def test_store_failure(self):
        """A transaction store failure is an internal server error."""
        with mock.patch.object(self.store, 'save') as mock_save:
            mock_save.side_effect = TransactionStoreError('nope')
            response = self._authorize(client_id='acme',
                                       redirect_uri='https://acme.example/cb')
        self.assertEqual(response.status_code,
                         HTTPStatus.INTERNAL_SERVER_ERROR)
        self.assertEqual(response.content_type, 'application/json')


class TestDispatcher(TestCase):
    """Requests are routed on the last path segment."""

    def setUp(self):
        self.app = create_web_app(store=mock.MagicMock())
        self.app.config['ACCESS_TOKEN_URL'] = \
            'https://sso.example/cas/oauth2.0/accessToken'
        self.app.config['PROFILE_URL'] = \
            'https://sso.example/cas/oauth2.0/profile'
        self.client = self.app.test_client()

    def test_unknown_method(self):
        """An unknown endpoint gets a plain-text error with status 200."""
        for method in ['bogus', 'AUTHORIZE', 'callbackauthorize']:
            response = self.client.get(f'/oauth2.0/{method}')
            self.assertEqual(response.status_code, HTTPStatus.OK)
            self.assertEqual(response.mimetype, 'text/plain')
            self.assertEqual(response.data, b'error=invalid_request')

    def test_access_token(self):
        """Token requests are handed to the CAS token endpoint."""
        response = self.client.post(
            '/oauth2.0/accessToken?grant_type=authorization_code',
            data={'code': 'ST-123'}
        )
        self.assertEqual(response.status_code,
                         HTTPStatus.TEMPORARY_REDIRECT)
        self.assertEqual(
            response.headers['Location'],
            'https://sso.example/cas/oauth2.0/accessToken'
            '?grant_type=authorization_code'
        )

    def test_profile(self):
        """Profile requests are handed to the CAS profile endpoint."""
        response = self.client.get('/oauth2.0/profile?access_token=abc')
        self.assertEqual(response.status_code,
                         HTTPStatus.TEMPORARY_REDIRECT)
        self.assertEqual(response.headers['Location'],
                         'https://sso.example/cas/oauth2.0/profile'
                         '?access_token=abc')

    def test_register_endpoint(self):
        """The host application can provide its own profile view."""
        register_endpoint(self.app, Route.PROFILE,
                          lambda: make_response('{"id": "foo"}'))
        response = self.client.get('/oauth2.0/profile')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertEqual(response.data, b'{"id": "foo"}')
