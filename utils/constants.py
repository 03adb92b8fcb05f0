# utils/constants.py
# 프로젝트 전체에서 사용하는 상수들을 정의합니다.


class SlackBlocks:
    """Slack 블록 타입 상수"""
    SECTION = "section"
    DIVIDER = "divider"
    CONTEXT = "context"
    ACTIONS = "actions"
    INPUT = "input"


class SlackElements:
    """Slack 엘리먼트 타입 상수"""
    BUTTON = "button"
    EXTERNAL_SELECT = "external_select"
    PLAIN_TEXT_INPUT = "plain_text_input"


class SlackPayloadTypes:
    """Slack 인터랙션 페이로드 타입 상수"""
    INTERACTIVE_MESSAGE = "interactive_message"
    BLOCK_ACTIONS = "block_actions"
    BLOCK_SUGGESTION = "block_suggestion"
    DIALOG_SUBMISSION = "dialog_submission"


class ButtonStyles:
    """버튼 스타일 상수"""
    PRIMARY = "primary"
    DANGER = "danger"


class CallbackIds:
    """콜백 ID 상수"""
    ACCEPT_TOS = "accept_tos"
    PICK_NEIGHBORHOOD = "pick_sf_neighborhood"
    KUDOS_SUBMIT = "kudos_submit"
    DEVICE_PAGE_PREV = "device_page_prev"
    DEVICE_PAGE_NEXT = "device_page_next"
    DEVICE_TOGGLE = "device_toggle"


class SlashKeywords:
    """슬래시 커맨드 하위 명령 상수"""
    BUTTON = "button"
    MENU = "menu"
    DIALOG = "dialog"
    DEVICES = "devices"


class DeviceTypeCodes:
    """게이트웨이 기기 타입 코드"""
    REMOTE = 0
    LIGHT = 2
    PLUG = 3
    SENSOR = 4


class ErrorMessages:
    """에러 메시지 상수"""
    AGREEMENT_FAILED = "An error occurred while recording your agreement choice."
    NEIGHBORHOOD_FAILED = "An error occurred while finding the neighborhood."
    KUDOS_FAILED = "An error occurred while incrementing kudos."
    DIALOG_OPEN_FAILED = "An error occurred while opening the dialog"
    DEVICES_FAILED = "An error occurred while reading devices from the gateway"
    DEVICE_TOGGLE_FAILED = "An error occurred while switching the device"
    GENERIC = "An error occurred while processing your request."
    EMPTY_COMMENT = "The comment cannot be empty"


class SuccessMessages:
    """성공 메시지 상수"""
    POLICY_ACCEPTED = "Thank you for agreeing to the terms of service"
    POLICY_DENIED = "You have denied the terms of service. You will no longer have access to this app."
    NEIGHBORHOOD_DESCRIPTION = "One of the most interesting neighborhoods in the city."


class UsageMessages:
    """사용법 안내 상수"""
    SLASH_USAGE = "Use this command followed by `button`, `menu`, `dialog`, or `devices`."
