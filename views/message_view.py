# views/message_view.py
# 슬래시 커맨드로 보내는 인터랙티브 메시지와 다이얼로그를 생성합니다.

from typing import Any, Dict

from models.reply import Reply
from utils.constants import ButtonStyles, CallbackIds, SlackBlocks, SlackElements


def build_terms_message() -> Reply:
    """이용약관 동의 버튼 메시지 (레거시 첨부 형식)"""
    return Reply(
        text="The terms of service for this app are _not really_ here: <https://unsplash.com/photos/bmmcfZqSjBU>",
        response_type="in_channel",
        attachments=[
            {
                "text": "Do you accept the terms of service?",
                "callback_id": CallbackIds.ACCEPT_TOS,
                "actions": [
                    {
                        "name": CallbackIds.ACCEPT_TOS,
                        "text": "Yes",
                        "value": "accept",
                        "type": SlackElements.BUTTON,
                        "style": ButtonStyles.PRIMARY
                    },
                    {
                        "name": CallbackIds.ACCEPT_TOS,
                        "text": "No",
                        "value": "deny",
                        "type": SlackElements.BUTTON,
                        "style": ButtonStyles.DANGER
                    }
                ]
            }
        ]
    )


def build_neighborhood_menu() -> Reply:
    """동네 자동완성 선택 메시지"""
    text = "Pick a neighborhood in San Francisco"
    return Reply(
        text=text,
        response_type="in_channel",
        blocks=[
            {
                "type": SlackBlocks.SECTION,
                "text": {"type": "mrkdwn", "text": f"*{text}*"}
            },
            {
                "type": SlackBlocks.ACTIONS,
                "block_id": "neighborhood_block",
                "elements": [
                    {
                        "type": SlackElements.EXTERNAL_SELECT,
                        "action_id": CallbackIds.PICK_NEIGHBORHOOD,
                        "placeholder": {"type": "plain_text", "text": "Choose a neighborhood"},
                        "min_query_length": 1
                    }
                ]
            }
        ]
    )


def build_kudos_dialog() -> Dict[str, Any]:
    """칭찬하기 다이얼로그"""
    return {
        "callback_id": CallbackIds.KUDOS_SUBMIT,
        "title": "Give kudos",
        "submit_label": "Give",
        "elements": [
            {
                "label": "Teammate",
                "type": "select",
                "name": "user",
                "data_source": "users",
                "placeholder": "Teammate Name"
            },
            {
                "label": "Comment",
                "type": "text",
                "name": "comment",
                "placeholder": "Thanks for helping me with my project!",
                "hint": "Describe why you think your teammate deserves kudos."
            }
        ]
    }
