import os


class Settings:
    PROJECT_NAME: str = "vocabtrainer"
    DEBUG: bool = False
    LOG_DIR: str = "log"
    LOG_FILE: str = "vocabtrainer.log"
    LOG_TO_DB: bool = os.environ.get("VOCAB_LOG_TO_DB", "1") == "1"
    DB_DIR: str = os.environ.get("VOCAB_DB_DIR", "db")
    DB_FILE: str = "vocabtrainer.db"
    WORDS_FILE: str = os.environ.get("VOCAB_WORDS_FILE", "vocabulary/words.csv")
    # Column headers of the word list
    ID_COLUMN: str = "ID"
    PROMPT_COLUMN: str = "English"
    TARGET_COLUMN: str = "Japanese"
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
