"""In-memory stand-ins for an IMAP session."""

from datetime import date, datetime

MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}


def make_record(
    uid: int,
    subject: str = "Test Subject",
    from_addr: str = "sender@example.com",
    body: bytes = b"Hello",
    internal_date: datetime | None = None,
    header: bytes | None = None,
) -> dict:
    """Build a complete UID FETCH record the way a server returns it."""
    if header is None:
        header = (
            f"From: {from_addr}\r\n"
            f"Subject: {subject}\r\n"
            f"Message-ID: <msg{uid}@example.com>\r\n"
            "\r\n"
        ).encode()
    return {
        "INTERNALDATE": internal_date or datetime(2024, 1, 15, 9, 30),
        "BODY[]": header + body,
        "UID": uid,
        "RFC822.HEADER": header,
    }


def parse_imap_date(value: str) -> date:
    day, month, year = value.split("-")
    return date(int(year), MONTHS[month], int(day))


class FakeSession:
    """Session over a fixed list of records.

    Fetching a message sets its \\SEEN flag, like a server answering a
    non-PEEK BODY[] fetch. Failures are injected per operation.
    """

    def __init__(
        self,
        records=(),
        *,
        fetch_result=None,
        search_result=None,
        search_error=None,
        fetch_error=None,
        store_errors=None,
    ):
        self.records = list(records)
        self.fetch_result = fetch_result
        self.search_result = search_result
        self.search_error = search_error
        self.fetch_error = fetch_error
        # (uid, op, flag) -> exception raised by store()
        self.store_errors = store_errors or {}
        self.flags: dict[int, set[str]] = {record["UID"]: set() for record in self.records}
        self.calls: list[tuple] = []

    @property
    def store_calls(self) -> list[tuple]:
        return [call[1:] for call in self.calls if call[0] == "store"]

    def search(self, terms):
        self.calls.append(("search", list(terms)))
        if self.search_error:
            raise self.search_error
        if self.search_result is not None:
            return list(self.search_result)

        if terms == ["ALL"]:
            return [record["UID"] for record in self.records]
        if terms == ["UNSEEN"]:
            return [r["UID"] for r in self.records if "\\SEEN" not in self.flags[r["UID"]]]
        if terms[0] == "SINCE":
            since = parse_imap_date(terms[1])
            return [r["UID"] for r in self.records if r["INTERNALDATE"].date() >= since]
        raise ValueError(f"unsupported search {terms}")

    def fetch(self, uids, fields):
        uids = list(uids)
        self.calls.append(("fetch", uids, list(fields)))
        if self.fetch_error:
            raise self.fetch_error
        if self.fetch_result is not None:
            return list(self.fetch_result)

        wanted = set(uids)
        result = []
        for record in self.records:
            if record["UID"] in wanted:
                self.flags[record["UID"]].add("\\SEEN")
                result.append(dict(record))
        return result

    def store(self, uids, op, flag):
        uids = list(uids)
        self.calls.append(("store", uids, op, flag))
        for uid in uids:
            error = self.store_errors.get((uid, op, flag))
            if error:
                raise error
            current = self.flags.setdefault(uid, set())
            if op == "+FLAGS":
                current.add(flag)
            else:
                current.discard(flag)
