"""Input/output for wall plans."""

from .parser import detection_result_to_dict, load_walls, room_to_dict

__all__ = ["load_walls", "room_to_dict", "detection_result_to_dict"]
