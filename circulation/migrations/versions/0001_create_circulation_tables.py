"""create books, members and loans

Revision ID: 0001
Revises:
Create Date: 2025-01-06 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

Identifier = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
ACTIVE = sa.text('return_date IS NULL')


def upgrade() -> None:
    op.create_table(
        'books',
        sa.Column('id', Identifier, primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('isbn', sa.String(20), nullable=True),
        sa.Column('publication_year', sa.Integer(), nullable=True),
        sa.CheckConstraint(
            'publication_year IS NULL OR (publication_year BETWEEN 1400 AND 3000)',
            name='books_publication_year_chk'),
    )
    op.create_index('idx_books_title_author', 'books', ['title', 'author'])

    op.create_table(
        'members',
        sa.Column('id', Identifier, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(320), nullable=True, unique=True),
        sa.Column('phone', sa.String(30), nullable=True),
    )
    op.create_index('idx_members_name', 'members', ['name'])

    op.create_table(
        'loans',
        sa.Column('id', Identifier, primary_key=True, autoincrement=True),
        sa.Column('book_id', Identifier, sa.ForeignKey('books.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('member_id', Identifier, sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('checkout_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.CheckConstraint('due_date >= checkout_date', name='loans_due_after_checkout_chk'),
        sa.CheckConstraint(
            'return_date IS NULL OR return_date >= checkout_date',
            name='loans_return_after_checkout_chk'),
    )
    op.create_index(
        'uq_loans_one_active_loan_per_book', 'loans', ['book_id'], unique=True,
        postgresql_where=ACTIVE, sqlite_where=ACTIVE)
    op.create_index('idx_loans_member_id', 'loans', ['member_id'])
    op.create_index(
        'idx_loans_active', 'loans', ['return_date'],
        postgresql_where=ACTIVE, sqlite_where=ACTIVE)
    op.create_index(
        'idx_loans_due_date_active', 'loans', ['due_date'],
        postgresql_where=ACTIVE, sqlite_where=ACTIVE)


def downgrade() -> None:
    op.drop_index('idx_loans_due_date_active', table_name='loans')
    op.drop_index('idx_loans_active', table_name='loans')
    op.drop_index('idx_loans_member_id', table_name='loans')
    op.drop_index('uq_loans_one_active_loan_per_book', table_name='loans')
    op.drop_table('loans')
    op.drop_index('idx_members_name', table_name='members')
    op.drop_table('members')
    op.drop_index('idx_books_title_author', table_name='books')
    op.drop_table('books')
