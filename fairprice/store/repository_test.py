import pytest

from fairprice.engine.price import compute_valuation
from fairprice.store.repository import AnalysisStore
from fairprice.store.repository import MISSING_FOLDER_NAME
from fairprice.store.repository import NO_FOLDER_NAME
from fairprice.store.repository import RecordNotFoundError


def _save(store, user_id, data, **kwargs):
  return store.save_analysis(user_id, data, compute_valuation(data), **kwargs)


class TestSaveAndGet:

  def test_roundtrip(self, store, saved_analysis, direct_input):
    """A saved analysis reads back with the same inputs and result."""
    loaded = store.get_analysis('alice', saved_analysis.id)

    assert loaded.inputs == direct_input
    assert loaded.result.final_buy_price == pytest.approx(
        saved_analysis.result.final_buy_price)
    assert loaded.result.diag['ticker'] == 'PETR4'
    assert loaded.notes == 'first'
    assert loaded.folder_id is None
    assert loaded.updated_at is None
    assert loaded.created_at == saved_analysis.created_at

  def test_average_mode_roundtrip(self, store, average_input):
    """Profit history and share count survive storage."""
    record = _save(store, 'alice', average_input)

    loaded = store.get_analysis('alice', record.id)

    assert loaded.inputs == average_input
    assert loaded.inputs.eps_direct is None

  def test_persisted_on_disk(self, store, saved_analysis):
    """A new store over the same directory sees saved analyses."""
    reopened = AnalysisStore(store.base_dir)

    assert reopened.get_analysis('alice', saved_analysis.id).ticker == 'PETR4'
    assert store.analyses_path.exists()
    assert store.analyses_path.with_suffix('.parquet.meta.json').exists()

  def test_other_user_cannot_read(self, store, saved_analysis):
    """Records of other users behave as missing."""
    with pytest.raises(RecordNotFoundError):
      store.get_analysis('bob', saved_analysis.id)

  def test_unknown_id(self, store):
    with pytest.raises(RecordNotFoundError, match='Analysis not found'):
      store.get_analysis('alice', 'nope')

  def test_save_into_unknown_folder(self, store, direct_input):
    with pytest.raises(RecordNotFoundError):
      _save(store, 'alice', direct_input, folder_id='nope')


class TestListAnalyses:

  def test_empty_store(self, store):
    assert store.list_analyses('alice') == []

  def test_newest_first(self, store, make_input):
    first = _save(store, 'alice', make_input(ticker='AAA1'))
    second = _save(store, 'alice', make_input(ticker='BBB2'))

    ids = [r.id for r in store.list_analyses('alice')]

    assert ids == [second.id, first.id]

  def test_scoped_to_user(self, store, make_input):
    _save(store, 'alice', make_input(ticker='AAA1'))
    _save(store, 'bob', make_input(ticker='BBB2'))

    assert [r.ticker for r in store.list_analyses('bob')] == ['BBB2']

  def test_search_by_ticker(self, store, make_input):
    """Search is a case-insensitive ticker substring match."""
    _save(store, 'alice', make_input(ticker='PETR4'))
    _save(store, 'alice', make_input(ticker='PETR3'))
    _save(store, 'alice', make_input(ticker='VALE3'))

    assert {r.ticker for r in store.list_analyses('alice', search='petr')
           } == {'PETR4', 'PETR3'}
    assert [r.ticker for r in store.list_analyses('alice', search='E3 ')
           ] == ['VALE3']
    assert store.list_analyses('alice', search='ITUB') == []

  def test_filter_by_folder(self, store, make_input):
    folder = store.create_folder('alice', 'Banks')
    filed = _save(store, 'alice', make_input(ticker='ITUB4'),
                  folder_id=folder.id)
    _save(store, 'alice', make_input(ticker='VALE3'))

    listed = store.list_analyses('alice', folder_id=folder.id)

    assert [r.id for r in listed] == [filed.id]


class TestUpdateAndDelete:

  def test_update_notes(self, store, saved_analysis):
    updated = store.update_notes('alice', saved_analysis.id, 'revised')

    assert updated.notes == 'revised'
    assert updated.updated_at is not None
    assert store.get_analysis('alice', saved_analysis.id).notes == 'revised'

  def test_update_notes_other_user(self, store, saved_analysis):
    with pytest.raises(RecordNotFoundError):
      store.update_notes('bob', saved_analysis.id, 'hijack')

    assert store.get_analysis('alice', saved_analysis.id).notes == 'first'

  def test_move_to_folder(self, store, saved_analysis):
    folder = store.create_folder('alice', 'Energy')

    moved = store.move_to_folder('alice', saved_analysis.id, folder.id)
    assert moved.folder_id == folder.id

    unfiled = store.move_to_folder('alice', saved_analysis.id, None)
    assert unfiled.folder_id is None

  def test_move_to_other_users_folder(self, store, saved_analysis):
    folder = store.create_folder('bob', 'Mine')

    with pytest.raises(RecordNotFoundError):
      store.move_to_folder('alice', saved_analysis.id, folder.id)

  def test_delete(self, store, saved_analysis):
    store.delete_analysis('alice', saved_analysis.id)

    assert store.list_analyses('alice') == []
    with pytest.raises(RecordNotFoundError):
      store.delete_analysis('alice', saved_analysis.id)

  def test_delete_other_user(self, store, saved_analysis):
    with pytest.raises(RecordNotFoundError):
      store.delete_analysis('bob', saved_analysis.id)

    assert len(store.list_analyses('alice')) == 1


class TestFolders:

  def test_create_and_list(self, store):
    first = store.create_folder('alice', '  Banks ')
    second = store.create_folder('alice', 'Energy')
    store.create_folder('bob', 'Other')

    folders = store.list_folders('alice')

    assert [f.id for f in folders] == [second.id, first.id]
    assert first.name == 'Banks'

  def test_blank_name(self, store):
    with pytest.raises(ValueError, match='empty'):
      store.create_folder('alice', '   ')

  def test_delete_unfiles_analyses(self, store, direct_input):
    """Deleting a folder keeps its analyses, now without a folder."""
    folder = store.create_folder('alice', 'Banks')
    record = _save(store, 'alice', direct_input, folder_id=folder.id)

    store.delete_folder('alice', folder.id)

    assert store.list_folders('alice') == []
    loaded = store.get_analysis('alice', record.id)
    assert loaded.folder_id is None
    assert loaded.updated_at is not None

  def test_delete_unknown(self, store):
    with pytest.raises(RecordNotFoundError, match='Folder not found'):
      store.delete_folder('alice', 'nope')

  def test_folder_name(self, store):
    folder = store.create_folder('alice', 'Banks')

    assert store.folder_name('alice', folder.id) == 'Banks'
    assert store.folder_name('alice', None) == NO_FOLDER_NAME
    assert store.folder_name('bob', folder.id) == MISSING_FOLDER_NAME

  def test_folder_counts(self, store, make_input):
    folder = store.create_folder('alice', 'Banks')
    _save(store, 'alice', make_input(ticker='ITUB4'), folder_id=folder.id)
    _save(store, 'alice', make_input(ticker='BBDC4'), folder_id=folder.id)
    _save(store, 'alice', make_input(ticker='VALE3'))

    assert store.folder_counts('alice') == {folder.id: 2, None: 1}
