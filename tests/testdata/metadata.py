# pylint: disable=missing-docstring
# pylint: disable=invalid-name
SERVICE_NAME = "my-service"
QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/webhooks"
MESSAGE_ID = "ff543ef5-acfa-481b-bcf0-7d50f8372446"


def all_successful(QueueUrl, Entries):  # pylint: disable=unused-argument
    """side effect for send_message_batch reporting every entry as sent"""
    return {
        "Successful": [
            {"Id": entry["Id"], "MessageId": f"message-{entry['Id']}", "MD5OfMessageBody": "md5"}
            for entry in Entries
        ],
        "Failed": [],
    }


def event(index: int = 0, client_code: str = "defaultClient") -> dict:
    return {
        "clientCode": client_code,
        "entity": "order",
        "eventName": "created",
        "content": {"id": index},
    }
