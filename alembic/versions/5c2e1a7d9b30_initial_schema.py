"""initial schema

Revision ID: 5c2e1a7d9b30
Revises:
Create Date: 2026-10-12 09:14:22.518304

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c2e1a7d9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('favorite_genres', sa.String(), nullable=True),
        sa.Column('reading_speed', sa.Integer(), nullable=False),
        sa.Column('preferred_format', sa.String(), nullable=False),
        sa.Column('books_per_year_goal', sa.Integer(), nullable=False),
        sa.Column('pages_per_day_goal', sa.Integer(), nullable=False),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('longest_streak', sa.Integer(), nullable=False),
        sa.Column('last_reading_date', sa.Date(), nullable=True),
        sa.Column('total_points', sa.Integer(), nullable=False),
        sa.Column('reading_points', sa.Integer(), nullable=False),
        sa.Column('social_points', sa.Integer(), nullable=False),
        sa.Column('challenge_points', sa.Integer(), nullable=False),
        sa.Column('redeemed_points', sa.Integer(), nullable=False),
        sa.Column('total_books_read', sa.Integer(), nullable=False),
        sa.Column('total_pages_read', sa.Integer(), nullable=False),
        sa.Column('total_reading_minutes', sa.Integer(), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)
    op.create_index('ix_user_email', 'user', ['email'], unique=True)
    op.create_index('ix_user_total_points', 'user', ['total_points'])

    op.create_table(
        'book',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('long_description', sa.String(), nullable=True),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('author_bio', sa.String(), nullable=True),
        sa.Column('isbn', sa.String(), nullable=True, unique=True),
        sa.Column('publisher', sa.String(), nullable=True),
        sa.Column('publication_date', sa.DateTime(), nullable=True),
        sa.Column('pages', sa.Integer(), nullable=True),
        sa.Column('word_count', sa.Integer(), nullable=True),
        sa.Column('reading_level', sa.String(), nullable=True),
        sa.Column('complexity', sa.Integer(), nullable=True),
        sa.Column('cover_image', sa.String(), nullable=False),
        sa.Column('physical_available', sa.Boolean(), nullable=False),
        sa.Column('physical_price', sa.Float(), nullable=False),
        sa.Column('physical_original_price', sa.Float(), nullable=True),
        sa.Column('physical_stock', sa.Integer(), nullable=False),
        sa.Column('ebook_available', sa.Boolean(), nullable=False),
        sa.Column('ebook_price', sa.Float(), nullable=False),
        sa.Column('audiobook_available', sa.Boolean(), nullable=False),
        sa.Column('audiobook_price', sa.Float(), nullable=False),
        sa.Column('rating_sum', sa.Integer(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('is_bestseller', sa.Boolean(), nullable=False),
        sa.Column('is_new_release', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_book_title', 'book', ['title'])
    op.create_index('ix_book_slug', 'book', ['slug'], unique=True)
    op.create_index('ix_book_author', 'book', ['author'])
    op.create_index('ix_book_status', 'book', ['status'])

    op.create_table(
        'bookgenre',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id', ondelete='CASCADE'), nullable=False),
        sa.Column('genre', sa.String(), nullable=False),
        sa.UniqueConstraint('book_id', 'genre'),
    )
    op.create_index('ix_bookgenre_book_id', 'bookgenre', ['book_id'])
    op.create_index('ix_bookgenre_genre', 'bookgenre', ['genre'])

    op.create_table(
        'userbadge',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('icon', sa.String(), nullable=False),
        sa.Column('earned_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'name'),
    )
    op.create_index('ix_userbadge_user_id', 'userbadge', ['user_id'])

    op.create_table(
        'libraryentry',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shelf', sa.String(), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'book_id'),
    )
    op.create_index('ix_libraryentry_user_id', 'libraryentry', ['user_id'])

    op.create_table(
        'follow',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('follower_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('followed_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('follower_id', 'followed_id'),
    )
    op.create_index('ix_follow_follower_id', 'follow', ['follower_id'])
    op.create_index('ix_follow_followed_id', 'follow', ['followed_id'])

    op.create_table(
        'moodentry',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('mood', sa.String(), nullable=False),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_moodentry_user_id', 'moodentry', ['user_id'])

    op.create_table(
        'order',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_number', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('shipping', sa.Float(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('coupon_code', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_order_order_number', 'order', ['order_number'], unique=True)
    op.create_index('ix_order_user_id', 'order', ['user_id'])

    op.create_table(
        'orderitem',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('book_id', sa.Integer(), sa.ForeignKey('book.id'), nullable=False),
        sa.Column('book_title', sa.String(), nullable=False),
        sa.Column('format', sa.String(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
    )

    op.create_table(
        'bookclub',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('current_book_id', sa.Integer(), sa.ForeignKey('book.id'), nullable=True),
        sa.Column('next_meeting', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_bookclub_name', 'bookclub', ['name'])

    op.create_table(
        'bookclubmember',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('bookclub.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('club_id', 'user_id'),
    )
    op.create_index('ix_bookclubmember_club_id', 'bookclubmember', ['club_id'])
    op.create_index('ix_bookclubmember_user_id', 'bookclubmember', ['user_id'])

    op.create_table(
        'discussion',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('bookclub.id'), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('topic', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_discussion_club_id', 'discussion', ['club_id'])


def downgrade():
    op.drop_table('discussion')
    op.drop_table('bookclubmember')
    op.drop_table('bookclub')
    op.drop_table('orderitem')
    op.drop_table('order')
    op.drop_table('moodentry')
    op.drop_table('follow')
    op.drop_table('libraryentry')
    op.drop_table('userbadge')
    op.drop_table('bookgenre')
    op.drop_table('book')
    op.drop_table('user')
