"""
BusMessage: Data structure representing a notification carried by the EventBus.
"""

from dataclasses import dataclass


@dataclass
class BusMessage:
    """
    A single notification published on the EventBus.

    Attributes:
        id (str): Unique identifier for the message.
        topic (str): The topic of the message (e.g., 'light.colors', 'status.text').
        sender (str): Who produced it (e.g., 'J0', 'EV', 'J1_R04').
        payload (dict): Message contents.
        ts (float): Simulation time (seconds) at which the message was published.
    """
    id: str
    topic: str
    sender: str
    payload: dict
    ts: float
