from datetime import datetime, timedelta

from conftest import run

from authcore.application.dtos.user_dtos import (
    RegisterUserDto, LoginUserDto, VerifyOtpDto, ResendOtpDto, ForgotPasswordDto,
    ResetPasswordDto, GoogleOAuthDto, RefreshTokenDto, AuthResponse, PendingVerificationResponse
)
from authcore.application.results import Failure, Success
from authcore.application.use_cases.common import ClientInfo
from authcore.domain.entities.otp_code import OtpCode
from authcore.domain.entities.session import Session
from authcore.domain.entities.user import GoogleLogin
from authcore.domain.enums import OtpPurpose, LoginType, UserType
from authcore.domain.exceptions import AuthErrorCode, DeliveryFailureReason, ErrorCategory
from authcore.domain.value_objects.email import Email
from authcore.infrastructure.orm.session_model import SessionModel
from authcore.infrastructure.repositories.user_repository_impl import UserRepositoryImpl


def get_user(uow_factory, email):
    async def load():
        async with uow_factory() as uow:
            return await uow.users.get_by_email(Email(email))
    return run(load())


def register(auth_engine, email="a@x.com", password="longpw123", full_name="A", **kwargs):
    return run(auth_engine.register(RegisterUserDto(email=email, password=password, full_name=full_name, **kwargs)))


def google_sign_in(auth_engine, email="g@x.com", google_id="google-sub-1", photo="https://img/1.png"):
    return run(auth_engine.google_oauth(GoogleOAuthDto(
        email=email, full_name="Gee User", profile_photo=photo, google_id=google_id
    )))


class TestRegister:

    def test_register_then_verify_round_trip(self, auth_engine, gateway, uow_factory):
        result = register(auth_engine)

        assert isinstance(result, Success)
        assert result.value.requires_verification is True
        assert result.value.user.is_verified is False
        assert result.value.user.login_type == "credential"
        assert result.value.user.user_type == UserType.MEMBER

        sent = gateway.sent[-1]
        assert sent["to_email"] == "a@x.com"
        assert sent["recipient_name"] == "A"
        assert sent["purpose"] == OtpPurpose.EMAIL_VERIFICATION

        verified = run(auth_engine.verify_otp(VerifyOtpDto(
            email="a@x.com", otp_code=sent["otp_code"], type=OtpPurpose.EMAIL_VERIFICATION
        )))

        assert verified.ok
        assert verified.value.success is True
        assert verified.value.user.email == "a@x.com"
        assert verified.value.user.login_method == "credential"
        assert get_user(uow_factory, "a@x.com").is_verified is True

    def test_register_issues_no_tokens(self, auth_engine):
        result = register(auth_engine)
        assert not hasattr(result.value, "access_token")

    def test_register_keeps_requested_user_type(self, auth_engine):
        result = register(auth_engine, user_type=UserType.MODERATOR)
        assert result.value.user.user_type == UserType.MODERATOR

    def test_duplicate_credential_email_is_rejected(self, auth_engine):
        register(auth_engine)
        result = register(auth_engine, password="another-pass")

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_ALREADY_REGISTERED
        assert result.category == ErrorCategory.CONFLICT

    def test_registration_losing_a_race_is_a_conflict(self, auth_engine, monkeypatch):
        register(auth_engine)

        async def not_seen_yet(self, email):
            return None

        # The second writer checked for the email before the first one committed
        monkeypatch.setattr(UserRepositoryImpl, "get_by_email", not_seen_yet)
        result = register(auth_engine, password="another-pass")

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.EMAIL_ALREADY_REGISTERED
        assert result.category == ErrorCategory.CONFLICT

    def test_email_registered_with_google_is_rejected_with_google_message(self, auth_engine):
        google_sign_in(auth_engine, email="a@x.com")
        result = register(auth_engine)

        assert result.code == AuthErrorCode.EMAIL_ALREADY_REGISTERED
        assert "Google" in result.error.message

    def test_delivery_failure_after_write_keeps_code_usable(self, auth_engine, gateway, uow_factory):
        gateway.fail_with = DeliveryFailureReason.RATE_LIMIT
        result = register(auth_engine)

        assert result.category == ErrorCategory.DELIVERY_FAILURE
        assert result.error.delivery_reason == DeliveryFailureReason.RATE_LIMIT
        assert get_user(uow_factory, "a@x.com") is not None

        gateway.fail_with = None
        verified = run(auth_engine.verify_otp(VerifyOtpDto(email="a@x.com", otp_code=gateway.last_code())))
        assert verified.ok


class TestLogin:

    def test_unverified_login_never_returns_tokens(self, auth_engine, gateway):
        register(auth_engine)
        result = run(auth_engine.login(LoginUserDto(email="a@x.com", password="longpw123")))

        assert isinstance(result.value, PendingVerificationResponse)
        assert result.value.requires_verification is True
        assert result.value.verification_token == gateway.last_code()
        assert not hasattr(result.value, "access_token")
        assert len(gateway.sent) == 2

    def test_unverified_login_can_withhold_code(self, settings, auth_engine, gateway):
        settings.RETURN_OTP_ON_UNVERIFIED_LOGIN = False
        register(auth_engine)
        result = run(auth_engine.login(LoginUserDto(email="a@x.com", password="longpw123")))

        assert result.value.requires_verification is True
        assert result.value.verification_token is None

    def test_verified_login_issues_tokens_and_session(self, auth_engine, verified_user, token_service, session_factory):
        email, password = verified_user
        result = run(auth_engine.login(
            LoginUserDto(email=email, password=password),
            ClientInfo(user_agent="pytest", ip_address="127.0.0.1")
        ))

        assert isinstance(result.value, AuthResponse)
        assert result.value.expires_in == 900
        assert result.value.user.last_login is not None

        claims = token_service.verify_token(result.value.access_token)
        assert claims["email"] == email
        assert claims["role"] == "member"
        assert claims["sub"] == str(result.value.user.id)

        db = session_factory()
        stored = db.query(SessionModel).filter(SessionModel.refresh_token == result.value.refresh_token).one()
        assert stored.user_agent == "pytest"
        assert stored.ip_address == "127.0.0.1"
        assert stored.expires_at > datetime.utcnow() + timedelta(days=6)
        db.close()

    def test_wrong_password(self, auth_engine, verified_user):
        email, _ = verified_user
        result = run(auth_engine.login(LoginUserDto(email=email, password="wrong-password")))

        assert result.code == AuthErrorCode.INVALID_CREDENTIALS

    def test_unknown_email_looks_like_wrong_password(self, auth_engine):
        result = run(auth_engine.login(LoginUserDto(email="nobody@x.com", password="whatever1")))

        assert result.code == AuthErrorCode.INVALID_CREDENTIALS
        assert result.error.message == "Invalid email or password."

    def test_google_account_login_with_password_is_wrong_method(self, auth_engine):
        google_sign_in(auth_engine, email="a@x.com")
        result = run(auth_engine.login(LoginUserDto(email="a@x.com", password="longpw123")))

        assert result.code == AuthErrorCode.WRONG_METHOD
        assert result.category == ErrorCategory.CONFLICT


class TestOtp:

    def test_consumed_code_is_rejected_afterwards(self, auth_engine, gateway):
        register(auth_engine)
        code = gateway.last_code()

        first = run(auth_engine.verify_otp(VerifyOtpDto(email="a@x.com", otp_code=code)))
        second = run(auth_engine.verify_otp(VerifyOtpDto(email="a@x.com", otp_code=code)))

        assert first.ok
        assert second.code == AuthErrorCode.INVALID_OR_EXPIRED_OTP

    def test_code_for_other_purpose_is_rejected(self, auth_engine, gateway):
        register(auth_engine)
        result = run(auth_engine.verify_otp(VerifyOtpDto(
            email="a@x.com", otp_code=gateway.last_code(), type=OtpPurpose.PASSWORD_RESET
        )))

        assert result.code == AuthErrorCode.INVALID_OR_EXPIRED_OTP

    def test_verify_unknown_user(self, auth_engine):
        result = run(auth_engine.verify_otp(VerifyOtpDto(email="ghost@x.com", otp_code="123456")))
        assert result.code == AuthErrorCode.USER_NOT_FOUND
        assert result.category == ErrorCategory.NOT_FOUND

    def test_resend_leaves_older_codes_valid(self, auth_engine, gateway, uow_factory):
        register(auth_engine)
        first_code = gateway.last_code()

        result = run(auth_engine.resend_otp(ResendOtpDto(email="a@x.com")))
        assert result.ok
        assert len(gateway.sent) == 2

        verified = run(auth_engine.verify_otp(VerifyOtpDto(email="a@x.com", otp_code=first_code)))
        assert verified.ok
        assert get_user(uow_factory, "a@x.com").is_verified is True

    def test_resend_for_password_reset_uses_reset_message(self, auth_engine, gateway, verified_user):
        email, _ = verified_user
        run(auth_engine.resend_otp(ResendOtpDto(email=email, type=OtpPurpose.PASSWORD_RESET)))

        assert gateway.sent[-1]["purpose"] == OtpPurpose.PASSWORD_RESET

    def test_resend_unknown_user(self, auth_engine):
        result = run(auth_engine.resend_otp(ResendOtpDto(email="ghost@x.com")))
        assert result.code == AuthErrorCode.USER_NOT_FOUND

    def test_mark_used_only_succeeds_once(self, auth_engine, gateway, uow_factory):
        register(auth_engine)
        user = get_user(uow_factory, "a@x.com")

        async def race():
            async with uow_factory() as uow:
                otp = await uow.otp_codes.find_valid(user.id, gateway.last_code(), OtpPurpose.EMAIL_VERIFICATION)
                first = await uow.otp_codes.mark_used(otp.id)
                second = await uow.otp_codes.mark_used(otp.id)
                return first, second

        assert run(race()) == (True, False)


class TestPasswordReset:

    def test_unknown_and_known_email_get_identical_answer(self, auth_engine, verified_user, gateway):
        email, _ = verified_user
        known = run(auth_engine.request_password_reset(ForgotPasswordDto(email=email)))
        unknown = run(auth_engine.request_password_reset(ForgotPasswordDto(email="ghost@x.com")))

        assert known.ok and unknown.ok
        assert known.value == unknown.value
        assert gateway.sent[-1]["purpose"] == OtpPurpose.PASSWORD_RESET
        assert gateway.sent[-1]["to_email"] == email

    def test_google_account_cannot_request_reset(self, auth_engine):
        google_sign_in(auth_engine)
        result = run(auth_engine.request_password_reset(ForgotPasswordDto(email="g@x.com")))

        assert result.code == AuthErrorCode.GOOGLE_ACCOUNT_ONLY

    def test_reset_changes_password_and_logs_in(self, auth_engine, verified_user, gateway):
        email, old_password = verified_user
        run(auth_engine.request_password_reset(ForgotPasswordDto(email=email)))

        result = run(auth_engine.reset_password(ResetPasswordDto(
            email=email, otp_code=gateway.last_code(), new_password="brand-new-pass"
        )))

        assert isinstance(result.value, AuthResponse)
        assert result.value.expires_in == 900

        old = run(auth_engine.login(LoginUserDto(email=email, password=old_password)))
        new = run(auth_engine.login(LoginUserDto(email=email, password="brand-new-pass")))
        assert old.code == AuthErrorCode.INVALID_CREDENTIALS
        assert isinstance(new.value, AuthResponse)

    def test_reset_code_is_single_use(self, auth_engine, verified_user, gateway):
        email, _ = verified_user
        run(auth_engine.request_password_reset(ForgotPasswordDto(email=email)))
        code = gateway.last_code()

        first = run(auth_engine.reset_password(ResetPasswordDto(email=email, otp_code=code, new_password="first-new-pw")))
        second = run(auth_engine.reset_password(ResetPasswordDto(email=email, otp_code=code, new_password="second-new-pw")))

        assert first.ok
        assert second.code == AuthErrorCode.INVALID_OR_EXPIRED_OTP

    def test_expired_code_is_rejected_even_when_value_matches(self, auth_engine, verified_user, uow_factory):
        email, _ = verified_user
        user = get_user(uow_factory, email)

        async def plant_expired_code():
            async with uow_factory() as uow:
                otp = OtpCode.issue(user.id, user.email, "654321", OtpPurpose.PASSWORD_RESET)
                otp.expires_at = datetime.utcnow() - timedelta(minutes=1)
                await uow.otp_codes.add(otp)
                await uow.commit()

        run(plant_expired_code())
        result = run(auth_engine.reset_password(ResetPasswordDto(
            email=email, otp_code="654321", new_password="brand-new-pass"
        )))

        assert result.code == AuthErrorCode.INVALID_OR_EXPIRED_OTP

    def test_verification_code_cannot_reset_password(self, auth_engine, gateway):
        register(auth_engine)
        result = run(auth_engine.reset_password(ResetPasswordDto(
            email="a@x.com", otp_code=gateway.last_code(), new_password="brand-new-pass"
        )))

        assert result.code == AuthErrorCode.INVALID_OR_EXPIRED_OTP

    def test_reset_unknown_user(self, auth_engine):
        result = run(auth_engine.reset_password(ResetPasswordDto(
            email="ghost@x.com", otp_code="123456", new_password="brand-new-pass"
        )))
        assert result.code == AuthErrorCode.USER_NOT_FOUND


class TestGoogleOAuth:

    def test_first_sign_in_creates_verified_google_user(self, auth_engine, uow_factory):
        result = google_sign_in(auth_engine)

        assert isinstance(result.value, AuthResponse)
        assert result.value.user.is_verified is True
        assert result.value.user.login_type == "google"

        user = get_user(uow_factory, "g@x.com")
        assert user.login_type == LoginType.GOOGLE
        assert user.google_id == "google-sub-1"
        assert user.password_hash is None
        assert user.last_login is not None

    def test_credential_account_cannot_be_taken_over(self, auth_engine, verified_user):
        email, _ = verified_user
        result = google_sign_in(auth_engine, email=email)

        assert result.code == AuthErrorCode.CREDENTIAL_ACCOUNT_EXISTS
        assert result.category == ErrorCategory.CONFLICT

    def test_backfills_google_id_when_missing(self, auth_engine, uow_factory):
        google_sign_in(auth_engine)

        async def clear_google_id():
            async with uow_factory() as uow:
                user = await uow.users.get_by_email(Email("g@x.com"))
                user.login = GoogleLogin()
                user.profile_photo = None
                await uow.users.update(user)
                await uow.commit()

        run(clear_google_id())
        result = google_sign_in(auth_engine, google_id="google-sub-2", photo="https://img/2.png")

        assert result.ok
        user = get_user(uow_factory, "g@x.com")
        assert user.google_id == "google-sub-2"
        assert user.profile_photo == "https://img/2.png"

    def test_existing_google_id_is_not_overwritten(self, auth_engine, uow_factory):
        google_sign_in(auth_engine)
        result = google_sign_in(auth_engine, google_id="google-sub-other")

        assert result.ok
        assert get_user(uow_factory, "g@x.com").google_id == "google-sub-1"

    def test_later_sign_in_refreshes_profile_photo(self, auth_engine, uow_factory):
        google_sign_in(auth_engine, photo="https://img/old.png")
        result = google_sign_in(auth_engine, photo="https://img/new.png")

        assert result.value.user.profile_photo == "https://img/new.png"
        user = get_user(uow_factory, "g@x.com")
        assert user.profile_photo == "https://img/new.png"
        assert user.google_id == "google-sub-1"

    def test_sign_in_without_photo_keeps_stored_photo(self, auth_engine, uow_factory):
        google_sign_in(auth_engine, photo="https://img/old.png")
        google_sign_in(auth_engine, photo=None)

        assert get_user(uow_factory, "g@x.com").profile_photo == "https://img/old.png"

    def test_google_id_linked_to_another_email_is_conflict(self, auth_engine, uow_factory):
        google_sign_in(auth_engine, email="old@x.com", google_id="google-sub-1")
        result = google_sign_in(auth_engine, email="new@x.com", google_id="google-sub-1")

        assert isinstance(result, Failure)
        assert result.code == AuthErrorCode.GOOGLE_ID_IN_USE
        assert result.category == ErrorCategory.CONFLICT
        assert get_user(uow_factory, "new@x.com") is None

    def test_backfill_with_google_id_of_another_account_is_conflict(self, auth_engine, uow_factory):
        google_sign_in(auth_engine, email="first@x.com", google_id="google-sub-1")
        google_sign_in(auth_engine, email="second@x.com", google_id="google-sub-2")

        async def clear_google_id():
            async with uow_factory() as uow:
                user = await uow.users.get_by_email(Email("second@x.com"))
                user.login = GoogleLogin()
                await uow.users.update(user)

        run(clear_google_id())
        result = google_sign_in(auth_engine, email="second@x.com", google_id="google-sub-1")

        assert result.code == AuthErrorCode.GOOGLE_ID_IN_USE
        assert get_user(uow_factory, "second@x.com").google_id is None


class TestRefreshSession:

    def test_rotation_invalidates_old_token(self, auth_engine, verified_user):
        email, password = verified_user
        login = run(auth_engine.login(LoginUserDto(email=email, password=password)))
        old_token = login.value.refresh_token

        refreshed = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=old_token)))
        assert isinstance(refreshed.value, AuthResponse)
        assert refreshed.value.refresh_token != old_token

        replay = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=old_token)))
        assert replay.code == AuthErrorCode.INVALID_TOKEN

        again = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=refreshed.value.refresh_token)))
        assert again.ok

    def test_rotation_keeps_session_row(self, auth_engine, verified_user, session_factory):
        email, password = verified_user
        login = run(auth_engine.login(LoginUserDto(email=email, password=password)))

        db = session_factory()
        before = db.query(SessionModel).filter(SessionModel.refresh_token == login.value.refresh_token).one().id
        db.close()

        refreshed = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=login.value.refresh_token)))

        db = session_factory()
        after = db.query(SessionModel).filter(SessionModel.refresh_token == refreshed.value.refresh_token).one().id
        assert db.query(SessionModel).count() == 1
        db.close()
        assert before == after

    def test_garbage_token(self, auth_engine):
        result = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token="not-a-jwt")))
        assert result.code == AuthErrorCode.INVALID_TOKEN

    def test_access_token_is_not_a_refresh_token(self, auth_engine, verified_user):
        email, password = verified_user
        login = run(auth_engine.login(LoginUserDto(email=email, password=password)))

        result = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=login.value.access_token)))
        assert result.code == AuthErrorCode.INVALID_TOKEN

    def test_signed_token_without_session(self, auth_engine, verified_user, uow_factory, token_service):
        user = get_user(uow_factory, verified_user[0])
        orphan = token_service.create_refresh_token(str(user.id)).token

        result = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=orphan)))
        assert result.code == AuthErrorCode.INVALID_TOKEN

    def test_expired_session_row(self, auth_engine, verified_user, uow_factory, token_service):
        user = get_user(uow_factory, verified_user[0])
        token = token_service.create_refresh_token(str(user.id)).token

        async def plant_expired_session():
            async with uow_factory() as uow:
                await uow.sessions.add(Session.open(user.id, token, datetime.utcnow() - timedelta(seconds=1)))
                await uow.commit()

        run(plant_expired_session())
        result = run(auth_engine.refresh_session(RefreshTokenDto(refresh_token=token)))

        assert result.code == AuthErrorCode.SESSION_EXPIRED
