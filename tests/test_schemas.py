"""Tests for input and entity schemas."""

import pytest
from pydantic import ValidationError

from xibo_agent.config import Settings
from xibo_agent.schemas.command import AddCommandInput, GetCommandsInput
from xibo_agent.schemas.common import ErrorResponse, SuccessResponse
from xibo_agent.schemas.layout import PublishLayoutInput
from xibo_agent.schemas.user import ChangePasswordInput, User
from xibo_agent.tools.base import query_params


class TestInputSchemas:
    """Tests for tool input models."""

    def test_regex_flag_range(self):
        with pytest.raises(ValidationError):
            GetCommandsInput(useRegexForName=2)

    def test_logical_operator(self):
        with pytest.raises(ValidationError):
            GetCommandsInput(logicalOperatorName="XOR")

    def test_add_command_requires_code(self):
        with pytest.raises(ValidationError):
            AddCommandInput(command="Reboot")

    def test_create_alert_on(self):
        assert AddCommandInput(command="a", code="b", createAlertOn="failure").createAlertOn == "failure"
        with pytest.raises(ValidationError):
            AddCommandInput(command="a", code="b", createAlertOn="sometimes")

    def test_publish_now_flag(self):
        with pytest.raises(ValidationError):
            PublishLayoutInput(layoutId=1, publishNow=3)

    def test_empty_password_rejected(self):
        with pytest.raises(ValidationError):
            ChangePasswordInput(userId=1, newPassword="", retypeNewPassword="")

    def test_query_params_drop_unset_and_tree_view(self):
        params = GetCommandsInput(code="reboot")
        assert query_params(params) == {"code": "reboot"}


class TestEntitySchemas:
    """Tests for CMS entity models."""

    def test_unknown_fields_kept(self):
        user = User.model_validate({"userId": 1, "userName": "a", "userTypeId": 1, "twoFactorTypeId": 0})
        assert user.model_dump()["twoFactorTypeId"] == 0

    def test_home_page_id_string_or_int(self):
        assert User(userId=1, userName="a", userTypeId=1, homePageId="icondashboard.view").homePageId == "icondashboard.view"
        assert User(userId=1, userName="a", userTypeId=1, homePageId=3).homePageId == 3


class TestEnvelopes:
    """Tests for the result envelopes."""

    def test_error_wire_keys(self):
        dumped = ErrorResponse(message="m", error_data={"x": 1}).to_dict()
        assert dumped == {"success": False, "message": "m", "errorData": {"x": 1}}

    def test_explicit_none_data_kept(self):
        assert SuccessResponse(data=None).to_dict() == {"success": True, "data": None}


class TestSettings:
    """Tests for settings normalization."""

    def test_cms_url_trailing_slash(self):
        assert Settings(cms_url="http://cms.test/").cms_url == "http://cms.test"

    def test_history_file_location(self, tmp_path):
        settings = Settings(generated_dir=tmp_path)
        assert settings.image_history_file == tmp_path / "imageHistory.json"
