from alembic import op

revision = "0001_studio_baseline"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("""
CREATE TABLE IF NOT EXISTS profiles (
    email VARCHAR(320) NOT NULL,
    role VARCHAR(20) DEFAULT 'alumna' NOT NULL,
    plan VARCHAR(20) DEFAULT 'free' NOT NULL,
    created_at TIMESTAMP WITHOUT TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (email),
    CONSTRAINT ck_profiles_role CHECK (role IN ('admin', 'instructor', 'alumna')),
    CONSTRAINT ck_profiles_plan CHECK (plan IN ('free', 'activa'))
);
    """)

    op.execute("""
CREATE TABLE IF NOT EXISTS classes (
    id VARCHAR(36) NOT NULL,
    title VARCHAR(255) NOT NULL,
    level VARCHAR(50) NOT NULL,
    discipline VARCHAR(100),
    description TEXT,
    start_at TIMESTAMP WITHOUT TIME ZONE,
    duration_minutes INTEGER,
    capacity INTEGER,
    "instructorEmail" VARCHAR(320),
    video_url TEXT,
    status VARCHAR(20) DEFAULT 'published' NOT NULL,
    booked_count INTEGER DEFAULT 0 NOT NULL,
    created_at TIMESTAMP WITHOUT TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (id),
    CONSTRAINT ck_classes_status CHECK (status IN ('draft', 'published')),
    CONSTRAINT ck_classes_booked_count_positive CHECK (booked_count >= 0),
    CONSTRAINT ck_classes_capacity_positive CHECK (capacity IS NULL OR capacity >= 0)
);
CREATE INDEX IF NOT EXISTS idx_classes_created_at ON classes (created_at);
    """)

    op.execute("""
CREATE TABLE IF NOT EXISTS bookings (
    id VARCHAR(36) NOT NULL,
    "classId" VARCHAR(36) NOT NULL,
    "userEmail" VARCHAR(320) NOT NULL,
    created_at TIMESTAMP WITHOUT TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (id),
    CONSTRAINT bookings_classid_useremail_key UNIQUE ("classId", "userEmail")
);
CREATE INDEX IF NOT EXISTS idx_bookings_class_id ON bookings ("classId");
CREATE INDEX IF NOT EXISTS idx_bookings_user_email ON bookings ("userEmail");
    """)

    op.execute("""
CREATE TABLE IF NOT EXISTS class_progress (
    id VARCHAR(36) NOT NULL,
    useremail VARCHAR(320) NOT NULL,
    classid VARCHAR(36) NOT NULL,
    completed_at TIMESTAMP WITHOUT TIME ZONE DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (id),
    CONSTRAINT class_progress_useremail_classid_key UNIQUE (useremail, classid)
);
CREATE INDEX IF NOT EXISTS idx_class_progress_user_completed ON class_progress (useremail, completed_at DESC);
    """)

    # Existing databases: CREATE TABLE IF NOT EXISTS leaves older tables untouched
    op.execute("ALTER TABLE classes ADD COLUMN IF NOT EXISTS booked_count INTEGER DEFAULT 0 NOT NULL;")

    # Keep one row per (class, user) pair before the unique constraints go in
    op.execute("""
DELETE FROM bookings b USING bookings d
WHERE b."classId" = d."classId" AND b."userEmail" = d."userEmail"
  AND b.id > d.id;
DELETE FROM class_progress p USING class_progress d
WHERE p.useremail = d.useremail AND p.classid = d.classid
  AND p.id > d.id;
    """)

    op.execute("""
DO $$
BEGIN
    IF NOT EXISTS (
        SELECT 1 FROM pg_constraint WHERE conname = 'ck_classes_booked_count_positive'
    ) THEN
        ALTER TABLE classes ADD CONSTRAINT ck_classes_booked_count_positive CHECK (booked_count >= 0);
    END IF;

    IF NOT EXISTS (
        SELECT 1 FROM pg_constraint WHERE conname = 'bookings_classid_useremail_key'
    ) THEN
        ALTER TABLE bookings ADD CONSTRAINT bookings_classid_useremail_key UNIQUE ("classId", "userEmail");
    END IF;

    IF NOT EXISTS (
        SELECT 1 FROM pg_constraint WHERE conname = 'class_progress_useremail_classid_key'
    ) THEN
        ALTER TABLE class_progress ADD CONSTRAINT class_progress_useremail_classid_key UNIQUE (useremail, classid);
    END IF;
END $$;
    """)

    # Seed the counter from the live bookings
    op.execute("""
UPDATE classes c SET booked_count = sub.n
FROM (SELECT "classId" AS cid, COUNT(*) AS n FROM bookings GROUP BY "classId") sub
WHERE c.id = sub.cid;
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS class_progress")
    op.execute("DROP TABLE IF EXISTS bookings")
    op.execute("DROP TABLE IF EXISTS classes")
    op.execute("DROP TABLE IF EXISTS profiles")
