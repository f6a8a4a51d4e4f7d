"""Runtime memory: activation records, the call stack that holds them, and the trace of records as they are popped.
"""

from minipas.lang.error import StackUnderflow


class ActivationRecord:
    """Frame holding the local variables of one running program or procedure invocation. Member names are
    case-insensitive; the owner name keeps its declared casing.
    """
    PROGRAM = "program"
    PROCEDURE = "procedure"

    def __init__(self, name, kind, level):
        self.name = name
        self.kind = kind
        self.level = level
        self.members = {}

    def __getitem__(self, key):
        return self.members[key.lower()]

    def __setitem__(self, key, value):
        self.members[key.lower()] = value

    def __contains__(self, key):
        return key.lower() in self.members

    def get(self, key, default=None):
        return self.members.get(key.lower(), default)

    def __eq__(self, other):
        return isinstance(other, ActivationRecord) and (self.name, self.kind, self.level, self.members) == (
            other.name, other.kind, other.level, other.members)

    def __repr__(self):
        return f"ActivationRecord(name='{self.name}', kind={self.kind}, level={self.level}, members={self.members})"

    def __str__(self):
        lines = [f"{self.level}: {self.kind.upper()} {self.name}"]
        lines.extend(f"   {key:<20}: {value}" for key, value in self.members.items())
        return "\n".join(lines)


class CallStack:
    """LIFO of activation records. Only the top record is visible to variable reads and writes."""

    def __init__(self):
        self.records = []

    def push(self, record):
        self.records.append(record)

    def pop(self):
        if not self.records:
            raise StackUnderflow()
        return self.records.pop()

    def peek(self):
        if not self.records:
            raise StackUnderflow()
        return self.records[-1]

    def __len__(self):
        return len(self.records)


class Trace:
    """Activation records in the order they were popped: every procedure invocation once, at the point it returned,
    and the program record last.
    """

    def __init__(self, records=None):
        self.records = list(records) if records is not None else []

    def append(self, record):
        self.records.append(record)

    def find(self, name):
        """Returns every record owned by name (case-sensitive), in pop order."""
        return [record for record in self.records if record.name == name]

    def get(self, name):
        """Returns the last popped record owned by name, or None."""
        found = self.find(name)
        return found[-1] if found else None

    def lookup(self, name, member):
        """Returns the value of member (case-insensitive) in the last record owned by name, or None."""
        record = self.get(name)
        return record.get(member) if record is not None else None

    def __getitem__(self, idx):
        return self.records[idx]

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)
