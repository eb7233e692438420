from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Task(Base):
    __tablename__ = "task"
    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)


class TaskEntry(Base):
    __tablename__ = "task_entry"
    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("task.id"), index=True)
    task_details = Column(Text, nullable=False)
