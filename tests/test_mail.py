import os

from kornshell.mail import DEFAULT_MESSAGE, MailChecker, Mailbox, parse_mailpath


def write(path, text="mail\n"):
    path.write_text(text)
    return str(path)


def touch_newer(path, atime=1000, mtime=2000):
    os.utime(path, (atime, mtime))


def make_checker():
    seen = []
    return MailChecker(seen.append), seen


def test_parse_mailpath_messages():
    assert parse_mailpath("/a%hi:/b?yo", False) == [("/a", "hi"), ("/b", "yo")]


def test_parse_mailpath_posix_ignores_question():
    assert parse_mailpath("/b?yo", True) == [("/b?yo", None)]


def test_parse_mailpath_escaped_percent():
    assert parse_mailpath("/a\\%x%msg", False) == [("/a%x", "msg")]
    assert parse_mailpath("/a\\%%b", False) == [("/a%%b", None)]


def test_parse_mailpath_empty_element():
    assert parse_mailpath("", False) == [("", None)]
    assert parse_mailpath("/a::/b", False) == [("/a", None), ("", None), ("/b", None)]


def test_announcement_default():
    assert Mailbox("/x").announcement == DEFAULT_MESSAGE
    assert Mailbox("/x", "hello").announcement == "hello"


def test_mail_announced_once(tmp_path):
    path = write(tmp_path / "box")
    os.utime(path, (1000, 1000))
    checker, seen = make_checker()
    checker.set_mail(path)
    assert checker.mailbox.mtime == 1000
    touch_newer(path)
    assert [b.path for b in checker.check(now=5000, mail_is_set=True)] == [path]
    assert seen[0].path == path
    assert checker.check(now=5001, mail_is_set=True) == []


def test_mail_not_set_means_no_check(tmp_path):
    path = write(tmp_path / "box")
    os.utime(path, (1000, 1000))
    checker, seen = make_checker()
    checker.set_mail(path)
    touch_newer(path)
    assert checker.check(now=5000, mail_is_set=False) == []
    assert seen == []


def test_missing_file_then_created(tmp_path):
    path = str(tmp_path / "box")
    checker, seen = make_checker()
    checker.set_mail(path)
    assert checker.mailbox.mtime == 0
    assert checker.check(now=10, mail_is_set=True) == []
    write(tmp_path / "box")
    touch_newer(path)
    assert len(checker.check(now=11, mail_is_set=True)) == 1


def test_empty_file_not_announced(tmp_path):
    path = write(tmp_path / "box", "")
    checker, seen = make_checker()
    checker.set_mail(path)
    touch_newer(path)
    assert checker.check(now=10, mail_is_set=True) == []
    assert checker.mailbox.mtime == 2000


def test_read_mail_not_announced(tmp_path):
    path = write(tmp_path / "box")
    os.utime(path, (1000, 1000))
    checker, seen = make_checker()
    checker.set_mail(path)
    touch_newer(path, atime=3000, mtime=2000)
    assert checker.check(now=10, mail_is_set=True) == []
    assert seen == []


def test_interval(tmp_path):
    path = write(tmp_path / "box")
    os.utime(path, (1000, 1000))
    checker, seen = make_checker()
    checker.set_interval(100)
    checker.set_mail(path)
    assert checker.check(now=1000, mail_is_set=True) == []
    touch_newer(path)
    assert checker.check(now=1050, mail_is_set=True) == []
    assert len(checker.check(now=1100, mail_is_set=True)) == 1


def test_mailpath_order_and_messages(tmp_path):
    p1 = write(tmp_path / "one")
    p2 = write(tmp_path / "two")
    for p in (p1, p2):
        os.utime(p, (1000, 1000))
    checker, seen = make_checker()
    checker.set_mailpath(f"{p1}%new mail:{p2}")
    for p in (p1, p2):
        touch_newer(p)
    announced = checker.check(now=10, mail_is_set=False)
    assert [b.path for b in announced] == [p2, p1]
    assert announced[1].announcement == "new mail"
    assert announced[0].announcement == DEFAULT_MESSAGE
    assert seen == announced


def test_mailpath_overrides_mail(tmp_path):
    p1 = write(tmp_path / "one")
    p2 = write(tmp_path / "two")
    for p in (p1, p2):
        os.utime(p, (1000, 1000))
    checker, seen = make_checker()
    checker.set_mail(p1)
    checker.set_mailpath(p2)
    touch_newer(p1)
    touch_newer(p2)
    assert [b.path for b in checker.check(now=10, mail_is_set=True)] == [p2]