from litverse.models.user import User, UserBadge, LibraryEntry, Follow, MoodEntry
from litverse.models.book import Book, BookGenre
from litverse.models.order import Order, OrderItem
from litverse.models.social import BookClub, BookClubMember, Discussion

# add ALL models here
