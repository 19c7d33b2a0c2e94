# -*- coding: utf-8 -*-

from dfd import Deferred, when


class TestWhenValues(object):
    """when() without any promise: the state is known synchronously."""

    def test_empty_list(self, scheduler, recorder):
        p = when([], scheduler=scheduler)
        assert p.state() == Deferred.RESOLVED

        p.done(recorder)
        scheduler.run()
        assert recorder.payloads == [[]]

    def test_truthy_values(self, scheduler, recorder):
        p = when([1, 'a', True], scheduler=scheduler)
        assert p.state() == Deferred.RESOLVED
        p.done(recorder)
        scheduler.run()
        assert recorder.payloads == [[1, 'a', True]]

    def test_falsy_value_rejects(self, scheduler, recorder):
        p = when([True, False], scheduler=scheduler)
        assert p.state() == Deferred.REJECTED

        p.fail(recorder)
        scheduler.run()
        assert recorder.payloads == [[True, False]]

    def test_accepts_any_iterable(self, scheduler):
        p = when(iter([None, 0]), scheduler=scheduler)
        assert p.state() == Deferred.REJECTED


class TestWhenPromises(object):

    def test_all_resolved(self, scheduler, recorder):
        df1 = Deferred(scheduler=scheduler)
        df2 = Deferred(scheduler=scheduler)
        p = when([df1.promise(), df2.promise()], scheduler=scheduler)
        p.done(recorder)

        df2.resolve('second')
        scheduler.run()
        assert p.state() == Deferred.PENDING

        df1.resolve('first')
        scheduler.run()
        assert p.state() == Deferred.RESOLVED
        assert recorder.payloads == [['first', 'second']]

    def test_rejects_only_when_all_are_settled(self, scheduler, recorder):
        df1 = Deferred(scheduler=scheduler)
        df2 = Deferred(scheduler=scheduler)
        p = when([df1.promise(), df2.promise()], scheduler=scheduler)
        p.fail(recorder)

        df1.resolve(1)
        scheduler.run()
        assert p.state() == Deferred.PENDING

        df2.reject('e')
        scheduler.run()
        assert p.state() == Deferred.REJECTED
        assert recorder.payloads == [[1, 'e']]

    def test_rejection_before_resolution(self, scheduler, recorder):
        """The last event is a resolution, but an item has failed."""
        df1 = Deferred(scheduler=scheduler)
        df2 = Deferred(scheduler=scheduler)
        p = when([df1.promise(), df2.promise()], scheduler=scheduler)
        p.fail(recorder)

        df2.reject('e')
        scheduler.run()
        assert p.state() == Deferred.PENDING

        df1.resolve(1)
        scheduler.run()
        assert p.state() == Deferred.REJECTED
        assert recorder.payloads == [[1, 'e']]

    def test_mix_of_values_and_promises(self, scheduler, recorder):
        df = Deferred(scheduler=scheduler)
        p = when(['value', df.promise()], scheduler=scheduler)
        p.done(recorder)
        assert p.state() == Deferred.PENDING

        df.resolve('async')
        scheduler.run()
        assert recorder.payloads == [['value', 'async']]

    def test_falsy_value_with_promise(self, scheduler, recorder):
        df = Deferred(scheduler=scheduler)
        p = when([None, df.promise()], scheduler=scheduler)
        p.fail(recorder)

        df.resolve('ok')
        scheduler.run()
        assert p.state() == Deferred.REJECTED
        assert recorder.payloads == [[None, 'ok']]

    def test_already_resolved_promise(self, scheduler, recorder):
        """Settled items are reported asynchronously."""
        df = Deferred(scheduler=scheduler)
        df.resolve('early')
        scheduler.run()

        p = when([df.promise(), True], scheduler=scheduler)
        assert p.state() == Deferred.PENDING
        p.done(recorder)
        scheduler.run()
        assert recorder.payloads == [['early', True]]

    def test_deferred_items(self, scheduler, recorder):
        df = Deferred(scheduler=scheduler)
        p = when([df], scheduler=scheduler)
        p.done(recorder)
        df.resolve(3)
        scheduler.run()
        assert recorder.payloads == [[3]]

    def test_progress_is_forwarded(self, scheduler, recorder):
        df1 = Deferred(scheduler=scheduler)
        df2 = Deferred(scheduler=scheduler)
        p = when([df1.promise(), df2.promise()], scheduler=scheduler)
        p.progress(recorder)

        df1.notify('df1 50%')
        df2.notify('df2 10%')
        scheduler.run()
        assert recorder.payloads == ['df1 50%', 'df2 10%']

    def test_deferred_when_method(self, scheduler, recorder):
        df = Deferred(scheduler=scheduler)
        other = Deferred(scheduler=scheduler)
        p = df.when([other.promise(), 'x'])
        p.done(recorder)

        other.resolve('y')
        assert scheduler.run() == 2
        assert recorder.payloads == [['y', 'x']]
        assert df.state() == Deferred.PENDING
