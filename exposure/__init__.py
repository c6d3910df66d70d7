"""
exposure — privacy exposure analysis for AI-chat history exports.

    from exposure import analyse_chat_history, result_to_dict
    result = analyse_chat_history(json.load(open("conversations.json")))
"""

__version__ = "1.0.0"

from exposure.report import analyse_chat_history, analyse_messages, result_to_dict  # noqa: E402

__all__ = [
    "__version__",
    "analyse_chat_history",
    "analyse_messages",
    "result_to_dict",
]
