APP_NAME = "Material Texture Exporter"
APP_VERSION = "1.0.0"

# Logical asset path, relative to the project root.
DEFAULT_OUTPUT_DIR = "Assets/textures/meta-horizon"

# Materials below this render queue are treated as opaque and must carry a base texture.
DEFAULT_RENDER_QUEUE_THRESHOLD = 3000

DEFAULT_TEXTURE_EXTENSION = ".png"

# Max issues listed per severity in the end-of-run summary.
SUMMARY_LIMIT = 10

SETTINGS_RELPATH = "ProjectSettings/texporter.json"
