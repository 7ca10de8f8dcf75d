from sqlalchemy import Column, Integer, String, LargeBinary, UniqueConstraint
from resultscache.db.database import Base


class BlobAttribute(Base):
    """One attribute slot of one key: a row per (entity_id, attribute)."""
    __tablename__ = "blob_attributes"

    id = Column(Integer, primary_key=True, index=True)
    entity_id = Column(String, nullable=False, index=True)
    attribute = Column(String, nullable=False, index=True)
    value = Column(LargeBinary, nullable=True)

    __table_args__ = (
        UniqueConstraint("entity_id", "attribute", name="uq_blob_entity_attribute"),
    )
