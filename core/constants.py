# core/constants.py
TRANSFER_STATUS_PENDING = 'pending'
TRANSFER_STATUS_APPROVED = 'approved'
TRANSFER_STATUS_REJECTED = 'rejected'

TRANSFER_STATUS_CHOICES = (
    (TRANSFER_STATUS_PENDING, 'Pending'),    # Customer submitted, awaiting admin review
    (TRANSFER_STATUS_APPROVED, 'Approved'),  # Admin moved the registration to the new program
    (TRANSFER_STATUS_REJECTED, 'Rejected'),  # Admin declined, registration unchanged
)

# Attribution used when a decision is recorded without a known admin user
DEFAULT_PROCESSED_BY = 'admin'

# Storage folders for uploaded media
ANNOUNCEMENT_IMAGES_DIR = 'announcement-images'
CATEGORY_QR_DIR = 'category-qr'

MANAGEMENT_ACTIONS = (
    ('create', 'Create'),
    ('update', 'Update'),
    ('delete', 'Delete'),
    ('toggle_active', 'Toggle Active'),
    ('upload', 'Upload'),
    ('approve_transfer', 'Approve Transfer'),
    ('reject_transfer', 'Reject Transfer'),
)
