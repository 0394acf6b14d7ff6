"""The organizing prompt sent to Gemini and the option clauses appended to it."""

from dataclasses import asdict, dataclass

SORT_CHOICES = ("original", "agency", "location", "amount")

DEFAULT_SYSTEM_PROMPT = """
أنت مساعد ذكي متخصص في ترتيب رسائل واتساب الخاصة بوكالات العملة المشفرة.

مهمتك:

استخراج وترتيب المعلومات التالية من كل رسالة:

الاسم

العنوان

الايدي

رقم الهاتف

اسم الوكالة


قواعد التنسيق العامة:

ضع كل حقل في سطر مستقل.
لا تترك أسطر فارغة بين الحقول.
افصل بين البطاقات بسطر فارغ واحد فقط.
لا تستخدم رموز مثل *** أو =====.
اكتب الايدي مباشرة كرقم دون كلمة "الايدي".
لا تكتب المبالغ أبداً.
الاسم يكتب كما ورد حرفياً.
فرّق بين الهاتف والايدي:

الأرقام اللبنانية (+961، 03، 70، 71، 76، 78، 79) = هواتف.
الأرقام التي تبدأ بـ+ أو 00 مع شرطة أو فراغ = هواتف.
الأرقام بجانب كلمة "وكالة" = ايديهات إلا إذا كانت أرقام هواتف لبنانية.


حلّل الرسائل واحدة تلو الأخرى بالترتيب.


الحالات:

1) رسالة تحتوي على ايدي واحد:

الاسم
العنوان
123456789
رقم الهاتف
اسم الوكالة

2) رسالة تحتوي على أكثر من ايدي:

الاسم
العنوان
رقم الهاتف
اسم الوكالة
123456789 ...
987654321 ...
-------------------------
المجموع :

مثال:

مروان يوسف يوسفجه
سوريا ادلب/ مشمشان
+0031669582
وكالة موج لبحر
48207546 ...
48259631 ...
-------------------------
المجموع :

3) إذا احتوت على طريقة تحويل (الهرم، الفؤاد، شا كاش، شحن براتب، خصم من النسبة):

الاسم
العنوان
رقم الهاتف
ملاحظة : <نوع التحويل>
اسم الوكالة
<ID1 ...>
<ID2 ...>
-------------------------
المجموع :

4) إذا احتوت على عنوان محفظة (hex):

الاسم
العنوان
رقم الهاتف
ملاحظة : شام كاش
<عنوان المحفظة>
اسم الوكالة
<ID1 ...>
<ID2 ...>
-------------------------
المجموع :

5) إذا كانت الرسالة على الشكل (الايدي + الوكالة فقط):

<ID>
<اسم الوكالة>

→ تكتب كما هي.

ضوابط إضافية:

"المجموع :" يكتب فقط عند وجود أكثر من ايدي.
خط الفاصل "-------------------------" يستخدم فقط عند وجود أكثر من ايدي.
خيار الدمج: يدمج فقط إذا الاسم نفسه بالضبط لكن ايديهات مختلفة.
خيار إظهار الايديهات فقط:


وكالة <اسم الوكالة>
<ID1>
<ID2>
<ID3>

إذا لم يعرف الوكالة:


وكالة غير معروفة
<ID>

لا تستخدم ايموجي.
لا تهمل أي رسالة حتى لو بدت ناقصة أو مكررة.
اكتب عدد الرسائل في الاسفل

يتم كتابة عدد الرسائل بنائن على الرسائل وليس الايديهات
اكتب العدد في السطر الأخير بالشكل: عدد الرسائل المحللة : <العدد>
"""

SORT_INSTRUCTIONS = {
    "original": "حافظ على نفس ترتيب الرسائل الأصلي دون أي تغيير.",
    "agency": "رتب البطاقات تصاعدياً حسب اسم الوكالة.",
    "location": "رتب البطاقات تصاعدياً حسب العنوان.",
    "amount": "رتب البطاقات حسب قيمة المبالغ من الأصغر إلى الأكبر إن وُجدت، وإن لم تتوفر مبالغ فحافظ على الترتيب الأصلي.",
}

MERGE_INSTRUCTION = "ادمج الرسائل التي تمتلك نفس الاسم تماماً مع تجميع ايديهاتها في بطاقة واحدة مع ذكر كل ايدي في سطر مستقل."
NO_MERGE_INSTRUCTION = "لا تدمج أي رسائل حتى لو تكرر الاسم."

ONLY_IDS_INSTRUCTION = 'فعّل وضع عرض الايديهات فقط: اعرض كل وكالة بالشكل "وكالة <اسم الوكالة>" يتبعها الايديهات المرتبطة بها فقط. الايديهات التي لا تعرف وكالتها تُجمع تحت "وكالة غير معروفة".'
ALL_FIELDS_INSTRUCTION = "اعرض جميع الحقول لكل رسالة كما هو موضح في القواعد، ولا تستخدم وضع عرض الايديهات فقط."

# "Extra instructions based on the user's options:"
GUIDANCE_HEADING = "تعليمات إضافية بناءً على خيارات المستخدم:"
# "Text to process:"
INPUT_HEADING = "النص المراد معالجته:"


@dataclass(frozen=True)
class ProcessingOptions:
    sort_by: str = "original"
    merge_duplicates: bool = False
    show_only_ids: bool = False

    def __post_init__(self):
        if self.sort_by not in SORT_CHOICES:
            raise ValueError(f"sort_by must be one of {SORT_CHOICES}, got {self.sort_by!r}")

    def to_dict(self):
        return asdict(self)


def build_options_guidance(options):
    merge = MERGE_INSTRUCTION if options.merge_duplicates else NO_MERGE_INSTRUCTION
    only_ids = ONLY_IDS_INSTRUCTION if options.show_only_ids else ALL_FIELDS_INSTRUCTION
    lines = [
        GUIDANCE_HEADING,
        f"- {SORT_INSTRUCTIONS[options.sort_by]}",
        f"- {merge}",
        f"- {only_ids}",
    ]
    return "\n".join(lines)


def build_system_prompt(options):
    return f"{DEFAULT_SYSTEM_PROMPT.strip()}\n\n{build_options_guidance(options)}"


def build_request_text(options, input_text):
    """Full text sent as the single prompt part: instructions, then the pasted messages."""
    return f"{build_system_prompt(options)}\n\n{INPUT_HEADING}\n{input_text}"
