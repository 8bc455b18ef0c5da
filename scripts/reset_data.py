from storysky.config import get_settings
from storysky.infrastructure.activity_log import FileActivityLog
from storysky.infrastructure.document_store import JsonFileDocumentStore, seed_document


def reset_data():
    settings = get_settings()
    JsonFileDocumentStore(settings.data_file).save(seed_document())
    # Activity history is meaningless once the stories it points at are gone
    FileActivityLog(settings.activity_file).truncate()
    print(f"Data reset! {settings.data_file} holds the seed dataset, activity log emptied.")


reset_data()
