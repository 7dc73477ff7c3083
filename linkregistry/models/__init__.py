from linkregistry.models.mapping_record import ClickEvent, MappingRecord
from linkregistry.models.views import MappingRecordView, RegistryStats, SweepReport


__all__ = [
    'ClickEvent',
    'MappingRecord',
    'MappingRecordView',
    'RegistryStats',
    'SweepReport',
]
