"""
SimEvent: Data structure representing a message carried by the EventBus.
"""

from dataclasses import dataclass


@dataclass
class SimEvent:
    """
    Represents a single event published on the EventBus.

    Attributes:
        id (str): Unique identifier for the event.
        topic (str): The topic of the event (e.g., 'fleet.snapshot', 'vehicle.completed').
        sender (str): ID of the publisher (e.g., 'fleet', 'runner').
        payload (dict): Arbitrary dictionary containing event contents.
        ts (float): Simulation time (in milliseconds) when the event was published.
    """
    id: str
    topic: str
    sender: str
    payload: dict
    ts: float
