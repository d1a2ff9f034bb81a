import logging

from engine.app import GameApp
from engine.level import load_level_file
from engine.settings import load_settings
from game.scenes.preview import PreviewScene


def main():
    cfg = load_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    level = load_level_file(cfg.level_path)
    app = GameApp(cfg, lambda screen: PreviewScene(cfg, level, screen))
    app.run()

if __name__ == "__main__":
    main()
