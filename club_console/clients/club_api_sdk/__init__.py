from club_console.clients.club_api_sdk.applications_client import ApplicationsClient
from club_console.clients.club_api_sdk.collection_client import CollectionClient
from club_console.clients.club_api_sdk.contacts_client import ContactsClient
from club_console.clients.club_api_sdk.errors import ApiError
from club_console.clients.club_api_sdk.http_client import HttpClient
from club_console.clients.club_api_sdk.members_client import MembersClient
from club_console.clients.club_api_sdk.models import CollectionStats, ListingPage

__all__ = [
    "ApiError",
    "HttpClient",
    "CollectionClient",
    "ApplicationsClient",
    "ContactsClient",
    "MembersClient",
    "CollectionStats",
    "ListingPage",
]
