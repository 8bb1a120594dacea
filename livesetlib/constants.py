"""Fixed naming conventions of Live documents and project folders.

These are conventions of the host application, not user configuration.
"""

DOCUMENT_EXTENSION = ".als"
PROJECT_SUFFIX = " Project"
PROJECT_INFO_FOLDER = "Ableton Project Info"
BACKUP_FOLDER = "Backup"

# DocumentTree shape (xml2js convention)
ATTRIBUTE_KEY = "$"
TEXT_KEY = "_"
VALUE_ATTRIBUTE = "Value"

# Tempo sentinel when no schema location carries a value
TEMPO_NOT_FOUND = "NaN"

# Sample classification for files outside the owning project
EXTERNAL_SAMPLE = "external"

ERROR_PATH_MISSING = "Path does not exist"
ERROR_NOT_A_DIRECTORY = "Path is not a directory"
ERROR_BAD_SUFFIX = f"Folder name does not end with '{PROJECT_SUFFIX}'"
ERROR_NO_DOCUMENTS = f"No {DOCUMENT_EXTENSION} files found in directory"
ERROR_NO_INFO_FOLDER = f"'{PROJECT_INFO_FOLDER}' folder not found"
