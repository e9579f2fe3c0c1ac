from unittest import TestCase

from fastapi.testclient import TestClient

from auth import security
from auth import service as auth_service
from core import cache
from main import app


class BaseTestCase(TestCase):
    user = {
        "id": "410544b2-4001-4271-9855-fec4b6a6442a",
        "name": "User",
        "email": "user@nextmail.com",
    }

    def setUp(self):
        self.app = app
        # Redirects are asserted on, never followed.
        self.client = TestClient(self.app, follow_redirects=False)
        cache.views.clear()
        self.maxDiff = None

    def tearDown(self):
        cache.views.clear()

    def login(self, user=None):
        '''
        Authenticate the test client by planting a valid session cookie
        @param user: dict - user row to authenticate as, defaults to `self.user`
        '''
        user = user or self.user
        token = security.build_access_token(user_id=user["id"], email=user["email"])
        self.client.cookies.set(auth_service.ACCESS_COOKIE, token)

    def logout(self):
        self.client.cookies.clear()
