"""User profile loader for loading body metrics from YAML."""
import yaml
from pathlib import Path

from nutricheck.data_layer.models import UserProfile


class UserProfileLoader:
    """Loader for user profile configuration from YAML.

    Expected layout::

        profile:
          age: 30
          gender: male
          height_cm: 175
          weight_kg: 70
          activity_level: moderate
          goal: maintenance
          mood: calm          # optional
    """

    def __init__(self, yaml_path: str):
        """Initialize user profile loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing user profile
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> UserProfile:
        """Load user profile from YAML file.

        Returns:
            UserProfile object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            KeyError: If required fields are missing
            ValueError: If the document is not a mapping or a field has an invalid value
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{self.yaml_path}: expected a mapping, got {type(data).__name__}")

        # Accept both a top-level "profile" block and a bare mapping
        profile_data = data.get("profile", data)
        if not isinstance(profile_data, dict):
            raise ValueError(
                f"{self.yaml_path}: 'profile' must be a mapping, got {type(profile_data).__name__}"
            )

        return UserProfile.from_dict(profile_data)
