"""Unit tests for drone command records.

Run with: pytest tests/unit/test_commands.py -v
"""

from droneshow.coordination import (
    CommandPriority,
    CommandType,
    create_emergency_land_command,
    create_light_command,
    create_move_command,
)


class TestCommandFactories:
    """Tests for command factory functions."""

    def test_move_command(self):
        """Test move carries the position and speed."""
        cmd = create_move_command("drone-1", 35.0, 139.0, 80.0, speed=3.0)

        assert cmd.drone_id == "drone-1"
        assert cmd.command == CommandType.MOVE
        assert cmd.parameters == {
            "position": {"latitude": 35.0, "longitude": 139.0, "altitude": 80.0},
            "speed": 3.0,
        }
        assert cmd.priority == CommandPriority.NORMAL
        assert cmd.timestamp is not None

    def test_move_default_speed(self):
        """Test move defaults to 5 m/s."""
        assert create_move_command("drone-1", 35.0, 139.0, 80.0).parameters["speed"] == 5.0

    def test_light_command(self):
        """Test light carries color and intensity."""
        cmd = create_light_command("drone-2", "#ff0000", intensity=50.0)

        assert cmd.command == CommandType.LIGHT
        assert cmd.parameters == {"light_color": "#ff0000", "light_intensity": 50.0}

    def test_emergency_land_priority(self):
        """Test emergency landing is dispatched at emergency priority."""
        cmd = create_emergency_land_command("drone-3")

        assert cmd.command == CommandType.EMERGENCY_LAND
        assert cmd.priority == CommandPriority.EMERGENCY
        assert cmd.parameters == {}
