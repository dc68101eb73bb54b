"""表格行条纹.

模板中每输出一行调用一次 ``stripe()``,奇偶行交替得到条纹 class.
"""

from __future__ import annotations

import warnings

from markupsafe import Markup, escape


class Striper:
    """交替行条纹状态.

    Attributes:
        stripe_class: 条纹行使用的 class.
        striped: 下一次调用是否输出条纹 class.

    Example:
        >>> striper = Striper()
        >>> striper.stripe(), striper.stripe(), striper.stripe("last")
        (Markup(''), Markup(' class="alt"'), Markup(' class="last"'))

    """

    def __init__(self, stripe_class: str = "alt") -> None:
        self.stripe_class = stripe_class
        self.striped = False

    def stripe(self, with_class: str = "") -> Markup:
        """返回当前行的 class 属性并切换条纹状态.

        Args:
            with_class: 始终附加的额外 class.

        Returns:
            ``' class="..."'`` 形式的属性,无 class 时为空.

        """
        classes = f"{self.stripe_class if self.striped else ''} {with_class}".strip()
        self.striped = not self.striped
        if not classes:
            return Markup("")
        return Markup(' class="{}"').format(escape(classes))

    def reset(self) -> None:
        """重置状态,下一行不带条纹."""
        self.striped = False

    def reset_stripe(self) -> None:
        """已废弃,请使用 ``reset``."""
        warnings.warn("reset_stripe() 已废弃,请使用 reset()", DeprecationWarning, stacklevel=2)
        self.reset()


__all__ = ["Striper"]
