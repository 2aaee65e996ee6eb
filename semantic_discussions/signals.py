"""Lifecycle signals sent by the semantic index and the discussion subsystem.

Every signal is sent with ``send`` rather than ``send_robust`` so that a
failing receiver surfaces to whoever triggered the event.

``init_properties``
    Sent once per property registry with ``property_registry``.
``before_data_update_complete``
    Sent with ``store`` and ``semantic_data`` before a subject's facts are
    written. Receivers may add values to ``semantic_data``.
``after_data_update_complete``
    Sent with ``store`` and ``semantic_data`` right after the facts are
    written, inside the same transaction.
``api_flow_after_execute``
    Sent with ``module`` after a discussion API module has executed.
``user_get_reserved_names``
    Sent with the mutable ``reserved_usernames`` list.
"""

from django.dispatch import Signal

init_properties = Signal()
before_data_update_complete = Signal()
after_data_update_complete = Signal()
api_flow_after_execute = Signal()
user_get_reserved_names = Signal()
