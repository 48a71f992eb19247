"""Configuration management."""

import json
import yaml
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict
from cfvgen.types import GameConfig, DataGenConfig, ResolvingConfig


class Config:
    """Central configuration manager."""

    def __init__(self):
        self.game: GameConfig = GameConfig()
        self.datagen: DataGenConfig = DataGenConfig()
        self.resolving: ResolvingConfig = ResolvingConfig()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Load config from dictionary."""
        config = cls()
        data = data or {}
        if "game" in data:
            game = dict(data["game"])
            if "bet_sizing" in game:
                game["bet_sizing"] = tuple(game["bet_sizing"])
            config.game = GameConfig(**game)
        if "datagen" in data:
            config.datagen = DataGenConfig(**data["datagen"])
        if "resolving" in data:
            config.resolving = ResolvingConfig(**data["resolving"])
        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load config from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: Path) -> "Config":
        """Load config from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def validate(self):
        """Validate all sections, raising ValueError on the first problem."""
        self.game.validate()
        self.datagen.validate()
        self.resolving.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        game = asdict(self.game)
        game["bet_sizing"] = list(game["bet_sizing"])
        return {
            "game": game,
            "datagen": asdict(self.datagen),
            "resolving": asdict(self.resolving),
        }

    def save_yaml(self, path: Path):
        """Save config to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def save_json(self, path: Path):
        """Save config to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
