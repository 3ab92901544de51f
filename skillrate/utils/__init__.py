from skillrate.utils.data_utils import PeriodDataset
from skillrate.utils.date_utils import get_duration
