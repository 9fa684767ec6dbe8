from .charts import plot_sweep
from .renderer import AnimationClock, RowStateRenderer
