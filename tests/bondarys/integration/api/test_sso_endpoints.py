"""Integration tests for single sign-on."""


class TestSsoLogin:
    def test_first_login_creates_verified_account(self, test_client, google, api_v1_prefix):
        # Arrange
        google.register(
            "google-token",
            "google-sub-1",
            "dave@example.com",
            first_name="Dave",
            last_name="Miller",
        )

        # Act
        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "google", "providerToken": "google-token"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["refreshToken"]
        account = data["account"]
        assert account["email"] == "dave@example.com"
        assert account["firstName"] == "Dave"
        assert account["isActive"] is True
        assert account["isEmailVerified"] is True
        assert account["ssoProvider"] == "google"

    def test_repeated_login_finds_same_account(self, test_client, google, api_v1_prefix):
        google.register("google-token", "google-sub-1", "dave@example.com")
        body = {"provider": "google", "providerToken": "google-token"}

        first = test_client.post(f"{api_v1_prefix}/auth/sso", json=body).json()
        second = test_client.post(f"{api_v1_prefix}/auth/sso", json=body).json()

        assert first["account"]["id"] == second["account"]["id"]

    def test_links_existing_account_by_email(
        self, test_client, google, registered_user, api_v1_prefix
    ):
        """Test that manually entered names survive the merge."""
        google.register(
            "google-token",
            "google-sub-2",
            "carol@example.com",
            first_name="Caroline",
            avatar_url="https://example.com/carol.png",
        )

        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "google", "providerToken": "google-token"},
        )

        assert response.status_code == 200
        account = response.json()["account"]
        assert account["id"] == registered_user["account"]["id"]
        assert account["firstName"] == "Carol"
        assert account["avatarUrl"] == "https://example.com/carol.png"
        assert account["ssoProvider"] == "google"

    def test_unverified_email_cannot_claim_existing_account(
        self, test_client, google, registered_user, api_v1_prefix
    ):
        """Test that a provider identity with an unconfirmed email gets no session."""
        # Arrange
        google.register(
            "google-token",
            "attacker-sub",
            "carol@example.com",
            email_verified=False,
        )

        # Act
        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "google", "providerToken": "google-token"},
        )

        # Assert
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_PROVIDER_TOKEN"
        me = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {registered_user['accessToken']}"},
        )
        assert me.json()["ssoProvider"] is None

    def test_identity_without_email(self, test_client, google, api_v1_prefix):
        google.register("google-token", "google-sub-3", None)

        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "google", "providerToken": "google-token"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_PROVIDER_TOKEN"

    def test_rejected_token(self, test_client, api_v1_prefix):
        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "google", "providerToken": "forged"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication failed"

    def test_unsupported_provider(self, test_client, api_v1_prefix):
        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "myspace", "providerToken": "token"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_PROVIDER"

    def test_unconfigured_provider(self, test_client, api_v1_prefix):
        response = test_client.post(
            f"{api_v1_prefix}/auth/sso",
            json={"provider": "apple", "providerToken": "token"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_PROVIDER"


class TestSsoProviders:
    def test_lists_enabled_providers_only(self, test_client, api_v1_prefix):
        response = test_client.get(f"{api_v1_prefix}/auth/sso/providers")

        assert response.status_code == 200
        assert response.json() == {
            "providers": [{"id": "google", "displayName": "Google"}],
        }
